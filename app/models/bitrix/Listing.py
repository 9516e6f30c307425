from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

# Bitrix checkbox fields come back as "Y"/"N"
ENABLED_FLAG = "Y"

# channel name -> (ListingRecord attribute, Bitrix field suffix)
CHANNEL_FIELDS = {
    "property_finder": ("pf_enabled", "PfEnable"),
    "bayut": ("bayut_enabled", "BayutEnable"),
    "dubizzle": ("dubizzle_enabled", "DubizzleEnable"),
    "website": ("website_enabled", "WebsiteEnable"),
}

CREATED_FIELD = "createdTime"


class ListingRecord(BaseModel):
    """
    One listing as pulled from the CRM.

    Parsing is lenient: a bad price becomes 0, an unknown flag becomes False and
    an unreadable timestamp becomes None, so one broken item never fails a whole
    aggregation.
    """

    model_config = ConfigDict(frozen=True)

    status: str = ""
    pf_enabled: bool = False
    bayut_enabled: bool = False
    dubizzle_enabled: bool = False
    website_enabled: bool = False
    price: float = 0.0
    created_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip().upper()

    @field_validator(
        "pf_enabled", "bayut_enabled", "dubizzle_enabled", "website_enabled",
        mode="before",
    )
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        return value == ENABLED_FLAG

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> float:
        return parse_price(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _coerce_created_at(cls, value: Any) -> Optional[datetime]:
        if isinstance(value, datetime):
            return value
        if not isinstance(value, str) or not value:
            return None
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None

    @classmethod
    def from_bitrix(cls, item: dict, prefix: str) -> "ListingRecord":
        values = {
            "status": item.get(f"{prefix}Status"),
            "price": item.get(f"{prefix}Price"),
            "created_at": item.get(CREATED_FIELD),
        }
        for attribute, suffix in CHANNEL_FIELDS.values():
            values[attribute] = item.get(f"{prefix}{suffix}")
        return cls(**values)


def parse_price(value: Any) -> float:
    """Read a Bitrix price, including money strings like "1500000|AED"."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).split("|", 1)[0].strip().replace(",", "")
        try:
            number = float(text)
        except ValueError:
            return 0.0
    # nan and inf would poison every sum they touch
    if number != number or number in (float("inf"), float("-inf")):
        return 0.0
    return number
