"""Read-only query selectors."""

from inventory_kernel.selectors.base import BaseSelector
from inventory_kernel.selectors.stock_event_selector import StockEventSelector

__all__ = ["BaseSelector", "StockEventSelector"]
