"""ORM models.  Importing this package registers every table on Base.metadata."""

from inventory_kernel.models.stock_history import StockHistoryModel

__all__ = ["StockHistoryModel"]
