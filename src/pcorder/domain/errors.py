"""Domain error taxonomy.

Each error carries a stable ``code`` that the service layer copies into
``ServiceError.code``. State-transition refusals (cancel/fulfil on a settled
order) are not errors; they surface as ``False`` from the ledger.
"""

from __future__ import annotations


class PcOrderError(Exception):
    """Base class for all domain errors."""

    code = "ERROR"


class ValidationError(PcOrderError, ValueError):
    """A required input is absent or malformed."""

    code = "VALIDATION_FAILED"


class DuplicateCardError(PcOrderError):
    """A card number has already been issued."""

    code = "DUPLICATE_CARD"


class InvalidPaymentError(PcOrderError):
    """The payment card failed its validity check at placement time."""

    code = "INVALID_PAYMENT"
