"""Business logic services."""

from src.services.commission import create_commission_for_bid_request
from src.services.commission_adjustments import create_commission_adjustment
from src.services.commission_payments import (
    process_commission_payment,
    settle_unpaid_commissions,
)
from src.services.rate_sheet import seed_rate_sheet

__all__ = [
    "create_commission_for_bid_request",
    "create_commission_adjustment",
    "process_commission_payment",
    "settle_unpaid_commissions",
    "seed_rate_sheet",
]
