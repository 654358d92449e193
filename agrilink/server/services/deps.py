"""
Service dependencies.

Each service is built per request around the request-scoped database session
and injected into route handlers through the ``*Dep`` aliases below.
"""

from typing import Annotated, Callable, Type, TypeVar

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.database import get_session

from .addresses import AddressService
from .alerts import AlertService
from .auth import AuthService
from .cart import CartService
from .categories import CategoryService
from .devices import DeviceService
from .farm_analytics import FarmAnalyticsService
from .farm_export import FarmExportService
from .farms import FarmService
from .follows import FollowService
from .listings import ListingService
from .messaging import MessagingService
from .notifications import NotificationService
from .orders import OrderService
from .password_reset import PasswordResetService
from .payments import PaymentService
from .profiles import CustomerProfileService, FarmerProfileService, ManagerProfileService
from .reviews import ReviewService
from .sensor_analytics import SensorAnalyticsService
from .telemetry import TelemetryService
from .wishlist import WishlistService

S = TypeVar("S")

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def provide(service_cls: Type[S]) -> Callable[[AsyncSession], S]:
    """Build a FastAPI dependency that constructs ``service_cls`` with the request session."""

    def _factory(session: SessionDep) -> S:
        return service_cls(session)

    _factory.__name__ = f"get_{service_cls.__name__}"
    return _factory


DeviceServiceDep = Annotated[DeviceService, Depends(provide(DeviceService))]
TelemetryServiceDep = Annotated[TelemetryService, Depends(provide(TelemetryService))]
AlertServiceDep = Annotated[AlertService, Depends(provide(AlertService))]
SensorAnalyticsServiceDep = Annotated[SensorAnalyticsService, Depends(provide(SensorAnalyticsService))]

AuthServiceDep = Annotated[AuthService, Depends(provide(AuthService))]
PasswordResetServiceDep = Annotated[PasswordResetService, Depends(provide(PasswordResetService))]

FarmServiceDep = Annotated[FarmService, Depends(provide(FarmService))]
FarmAnalyticsServiceDep = Annotated[FarmAnalyticsService, Depends(provide(FarmAnalyticsService))]
FarmExportServiceDep = Annotated[FarmExportService, Depends(provide(FarmExportService))]

ListingServiceDep = Annotated[ListingService, Depends(provide(ListingService))]
ReviewServiceDep = Annotated[ReviewService, Depends(provide(ReviewService))]
CategoryServiceDep = Annotated[CategoryService, Depends(provide(CategoryService))]
WishlistServiceDep = Annotated[WishlistService, Depends(provide(WishlistService))]

CartServiceDep = Annotated[CartService, Depends(provide(CartService))]
OrderServiceDep = Annotated[OrderService, Depends(provide(OrderService))]
PaymentServiceDep = Annotated[PaymentService, Depends(provide(PaymentService))]

NotificationServiceDep = Annotated[NotificationService, Depends(provide(NotificationService))]
MessagingServiceDep = Annotated[MessagingService, Depends(provide(MessagingService))]

FarmerProfileServiceDep = Annotated[FarmerProfileService, Depends(provide(FarmerProfileService))]
ManagerProfileServiceDep = Annotated[ManagerProfileService, Depends(provide(ManagerProfileService))]
CustomerProfileServiceDep = Annotated[CustomerProfileService, Depends(provide(CustomerProfileService))]
AddressServiceDep = Annotated[AddressService, Depends(provide(AddressService))]
FollowServiceDep = Annotated[FollowService, Depends(provide(FollowService))]
