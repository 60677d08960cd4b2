"""Balance aggregation."""

from supply_tracker.services.aggregation.balance_aggregator import BalanceAggregator

__all__ = ["BalanceAggregator"]
