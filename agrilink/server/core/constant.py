"""
Application constants.

Values here are fixed at build time. Anything operators may want to change
belongs in ``config.py`` instead.
"""

PROJECT_NAME = "AgriLink"
API_V1_STR = "/api/v1"

# Pagination defaults shared by every paged endpoint
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
