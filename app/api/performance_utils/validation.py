from datetime import date
from typing import Optional

from app.core.errors import InvalidArgument

MIN_YEAR = 1970


def validate_user_id(raw: Optional[str]) -> str:
    if raw is None or not str(raw).strip():
        raise InvalidArgument("Missing required parameter 'id'")
    user_id = str(raw).strip()
    if not (user_id.isascii() and user_id.isdigit()):
        raise InvalidArgument("Parameter 'id' must be a number")
    return user_id


def validate_window(year: int, month: int, today: date) -> None:
    """Reject impossible months and months that have not started yet."""
    if not 1 <= month <= 12:
        raise InvalidArgument("Parameter 'month' must be between 1 and 12")
    validate_year(year, today)
    if (year, month) > (today.year, today.month):
        raise InvalidArgument("Parameter 'month' must not be in the future")


def validate_year(year: int, today: date) -> None:
    if year < MIN_YEAR or year > today.year:
        raise InvalidArgument(f"Parameter 'year' must be between {MIN_YEAR} and {today.year}")


def elapsed_months(year: int, today: date) -> range:
    """Months 1..current month for this year, the full year for past years."""
    last = today.month if year == today.year else 12
    return range(1, last + 1)
