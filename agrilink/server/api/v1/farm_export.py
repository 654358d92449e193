"""
Farm Export Endpoints.

CSV downloads of the calling farmer's farms, fields, crop plans and a
dashboard summary. Each response is sent as an attachment named
``<report>_YYYY-MM-DD.csv``.
"""

from fastapi import APIRouter, Response

from agrilink.server.security import FarmerDep
from agrilink.server.services.deps import FarmExportServiceDep
from agrilink.server.services.farm_export import export_filename

router = APIRouter()

CSV_RESPONSE = {200: {"content": {"text/csv": {}}, "description": "CSV attachment"}}


def csv_attachment(content: str, prefix: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={export_filename(prefix)}"},
    )


@router.get("/farms", summary="Export Farms", response_class=Response, responses=CSV_RESPONSE)
async def export_farms(user: FarmerDep, service: FarmExportServiceDep):
    return csv_attachment(await service.export_farms(user.id), "farms")


@router.get("/fields", summary="Export Fields", response_class=Response, responses=CSV_RESPONSE)
async def export_fields(user: FarmerDep, service: FarmExportServiceDep):
    return csv_attachment(await service.export_fields(user.id), "fields")


@router.get("/crops", summary="Export Crop Plans", response_class=Response, responses=CSV_RESPONSE)
async def export_crop_plans(user: FarmerDep, service: FarmExportServiceDep):
    return csv_attachment(await service.export_crop_plans(user.id), "crop_plans")


@router.get(
    "/analytics",
    summary="Export Analytics Summary",
    description="Overview totals, average yield efficiency and the most planted crops.",
    response_class=Response,
    responses=CSV_RESPONSE,
)
async def export_analytics_summary(user: FarmerDep, service: FarmExportServiceDep):
    return csv_attachment(await service.export_analytics_summary(user.id), "analytics_report")
