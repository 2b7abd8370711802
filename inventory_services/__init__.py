"""
inventory_services -- Orchestration over engines and the kernel.

Services hold no valuation logic of their own: they validate requests,
pick the event source, run the engines and log what happened.
"""

from inventory_services.checkpoint_cache import CheckpointCache
from inventory_services.event_source import EventSource, InMemoryEventSource
from inventory_services.financial_analytics_service import FinancialAnalyticsService

__all__ = [
    "CheckpointCache",
    "EventSource",
    "FinancialAnalyticsService",
    "InMemoryEventSource",
]
