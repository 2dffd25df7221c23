"""
Commission error taxonomy.

The engine and the payment settler log these and carry on; the
adjustment ledger and the rate sheet raise them to the caller.
"""


class CommissionError(Exception):
    """Base class for commission bookkeeping errors."""


class NoMatchingRate(CommissionError):
    """Requested service text matched no rate sheet category."""

    def __init__(self, service_requested: str):
        self.service_requested = service_requested
        super().__init__(f"No commission rate matches service '{service_requested}'")


class NoEligibleRecipient(CommissionError):
    """Neither a salesperson nor an administrator can receive the commission."""


class RecordNotFound(CommissionError):
    """A commission record, payment or rate row is missing."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class CommissionValidationError(CommissionError, ValueError):
    """Bad input for an adjustment or a rate update."""
