from typing import List

from pydantic import BaseModel, Field

from app.models.bitrix.Employee import EmployeeProfile


class ChannelCounts(BaseModel):
    """Published listings pushed to each distribution channel."""
    property_finder: int = Field(default=0, ge=0)
    bayut: int = Field(default=0, ge=0)
    dubizzle: int = Field(default=0, ge=0)
    website: int = Field(default=0, ge=0)


class MonthlyRollup(BaseModel):
    """Listing counts and worth for one calendar month."""
    month: str = Field(description="Display label, e.g. 'March 2024'")
    year: int
    month_number: int = Field(ge=1, le=12)
    live: int = Field(default=0, ge=0)
    published: int = Field(default=0, ge=0)
    draft: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    total_worth: float = Field(default=0.0, description="Sum of PUBLISHED prices")
    channels: ChannelCounts = Field(default_factory=ChannelCounts)


class PerformanceSnapshot(BaseModel):
    """A user's profile with the rollup for a single month."""
    profile: EmployeeProfile
    rollup: MonthlyRollup


class YearlyPerformanceResponse(BaseModel):
    """One rollup per elapsed month, ascending."""
    profile: EmployeeProfile
    year: int
    months: List[MonthlyRollup]
