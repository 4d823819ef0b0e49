"""Analytics query package."""

from fiscalforge.queries.analytics import AnalyticsEngine, sum_amounts

__all__ = ["AnalyticsEngine", "sum_amounts"]
