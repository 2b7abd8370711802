"""
Typed Exception Hierarchy for the Inventory Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from InventoryKernelError:

    InventoryKernelError (base)
    |
    +-- RequestValidationError
    |   +-- MissingDateRangeError
    |   +-- InvalidDateRangeError
    |
    +-- ConfigurationError
    |   +-- InvalidConfigurationError
    |
    +-- ReplayError
        +-- CheckpointAfterWindowError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Request         | DATE_RANGE_REQUIRED         | from/to missing on a summary request
                | INVALID_DATE_RANGE          | from is after to
----------------|-----------------------------|-----------------------------------------
Configuration   | INVALID_CONFIGURATION       | Valuation config set fails validation
----------------|-----------------------------|-----------------------------------------
Replay          | CHECKPOINT_AFTER_WINDOW     | Checkpoint taken after the window start

===============================================================================
HANDLING PATTERNS
===============================================================================

Request validation happens BEFORE the replay engine runs.  The engine never
raises on data conditions: missing prices fall back to the running average,
over-issues are clamped, unknown reasons are booked as COGS.  Callers
therefore only need to handle RequestValidationError at the API edge:

    try:
        summary = service.get_financial_summary_wac(start, end, supplier)
    except RequestValidationError as e:
        return {"error": e.code, "message": str(e)}

ReplayError signals a programming error by the caller (e.g. handing the
engine a checkpoint that does not precede the window) and should propagate.
"""

from __future__ import annotations

from datetime import date


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "INVENTORY_KERNEL_ERROR"


# Request validation


class RequestValidationError(InventoryKernelError):
    """Base exception for rejected caller input."""

    code: str = "INVALID_REQUEST"


class MissingDateRangeError(RequestValidationError):
    """A required date-range bound was not provided."""

    code: str = "DATE_RANGE_REQUIRED"

    def __init__(self, start_name: str = "from", end_name: str = "to"):
        self.start_name = start_name
        self.end_name = end_name
        super().__init__(f"{start_name} and {end_name} are required")


class InvalidDateRangeError(RequestValidationError):
    """The start of a date range is after its end."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(
        self,
        start: date,
        end: date,
        start_name: str = "from",
        end_name: str = "to",
    ):
        self.start = start
        self.end = end
        self.start_name = start_name
        self.end_name = end_name
        super().__init__(
            f"{start_name} must be on or before {end_name} "
            f"(got {start.isoformat()} > {end.isoformat()})"
        )


# Configuration


class ConfigurationError(InventoryKernelError):
    """Base exception for configuration errors."""

    code: str = "CONFIGURATION_ERROR"


class InvalidConfigurationError(ConfigurationError):
    """Valuation configuration failed validation."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, errors: list[str], source: str | None = None):
        self.errors = list(errors)
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(
            f"Invalid valuation configuration{where}: {'; '.join(self.errors)}"
        )


# Replay


class ReplayError(InventoryKernelError):
    """Base exception for replay contract violations."""

    code: str = "REPLAY_ERROR"


class CheckpointAfterWindowError(ReplayError):
    """A replay checkpoint was captured after the window it should seed."""

    code: str = "CHECKPOINT_AFTER_WINDOW"

    def __init__(self, checkpoint_as_of: str, window_start: str):
        self.checkpoint_as_of = checkpoint_as_of
        self.window_start = window_start
        super().__init__(
            f"Checkpoint as of {checkpoint_as_of} is after window start {window_start}"
        )
