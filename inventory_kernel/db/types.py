"""
Module: inventory_kernel.db.types
Responsibility: Annotated type aliases and the rounding function for
    cost-grade column types.  Centralizes precision and rounding so that every
    model, engine and service uses identical definitions.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    selectors/, engines and services.  MUST NOT import from any of those.

Invariants enforced:
    - COST_DECIMAL_PLACES defines the canonical internal scale for unit costs
      and valuation totals (4 fractional digits).
    - round_cost() is the ONLY sanctioned rounding function for cost values.
    - No floats: all costs are Decimal.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from sqlalchemy import Numeric, String

# Price captured on a stock movement (matches the PRICE_AT_CHANGE column)
UnitPrice = Annotated[Decimal, Numeric(12, 2)]

# Short identifier strings
ShortCode = Annotated[str, String(50)]


COST_DECIMAL_PLACES = 4
DEFAULT_ROUNDING = ROUND_HALF_UP


def round_cost(
    value: Decimal,
    decimal_places: int = COST_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a cost value to the given number of decimal places.

    Preconditions: value is a Decimal, decimal_places >= 0.
    Postconditions: Returns value quantized to exactly decimal_places digits
        using the given rounding mode (default ROUND_HALF_UP).
    """
    return value.quantize(Decimal(1).scaleb(-decimal_places), rounding=rounding)

