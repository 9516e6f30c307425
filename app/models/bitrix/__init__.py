from app.models.bitrix.Employee import EmployeeProfile, SOCIAL_FIELDS
from app.models.bitrix.Listing import (
    CHANNEL_FIELDS,
    CREATED_FIELD,
    ENABLED_FLAG,
    ListingRecord,
    parse_price,
)
from app.models.bitrix.ListingStatus import ListingStatus

__all__ = [
    "EmployeeProfile",
    "SOCIAL_FIELDS",
    "CHANNEL_FIELDS",
    "CREATED_FIELD",
    "ENABLED_FLAG",
    "ListingRecord",
    "ListingStatus",
    "parse_price",
]
