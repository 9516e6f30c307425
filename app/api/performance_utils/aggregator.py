"""
Monthly listing rollup.

Turns a user's raw listing records into the counts shown on the performance
dashboard for one calendar month.

Rules:
- Only records whose created_at falls in the requested year/month count. The
  timestamp is read in whatever offset the CRM reported it with; nothing is
  converted between zones.
- live / published / draft partition the records by status. Any other status
  still counts towards total.
- Channel counts only consider PUBLISHED records whose channel flag is set, so
  each channel count is at most `published`.
- total_worth sums price over PUBLISHED records only. Bad prices were already
  read as 0 by ListingRecord.

aggregate() is pure: it neither mutates its input nor touches I/O, and an empty
window gives an all-zero rollup.
"""

import calendar
from typing import Iterable

from app.models.bitrix import CHANNEL_FIELDS, ListingRecord, ListingStatus
from app.models.performance import ChannelCounts, MonthlyRollup


def month_label(year: int, month: int) -> str:
    """'March 2024' style label."""
    return f"{calendar.month_name[month]} {year}"


def in_window(record: ListingRecord, year: int, month: int) -> bool:
    created = record.created_at
    return created is not None and created.year == year and created.month == month


def aggregate(records: Iterable[ListingRecord], year: int, month: int) -> MonthlyRollup:
    live = published = draft = total = 0
    total_worth = 0.0
    channels = dict.fromkeys(CHANNEL_FIELDS, 0)

    for record in records:
        if not in_window(record, year, month):
            continue
        total += 1

        if record.status == ListingStatus.LIVE.value:
            live += 1
        elif record.status == ListingStatus.DRAFT.value:
            draft += 1
        elif record.status == ListingStatus.PUBLISHED.value:
            published += 1
            total_worth += record.price
            for channel, (attribute, _) in CHANNEL_FIELDS.items():
                if getattr(record, attribute):
                    channels[channel] += 1

    return MonthlyRollup(
        month=month_label(year, month),
        year=year,
        month_number=month,
        live=live,
        published=published,
        draft=draft,
        total=total,
        total_worth=round(total_worth, 2),
        channels=ChannelCounts(**channels),
    )
