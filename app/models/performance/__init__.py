from app.models.performance.PerformanceResponse import (
    ChannelCounts,
    MonthlyRollup,
    PerformanceSnapshot,
    YearlyPerformanceResponse,
)

__all__ = [
    "ChannelCounts",
    "MonthlyRollup",
    "PerformanceSnapshot",
    "YearlyPerformanceResponse",
]
