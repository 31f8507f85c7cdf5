from enum import Enum
from typing import Dict, Iterable, List


class PaymentStatus(str, Enum):
    pending = "pendente"
    paid = "pago"
    cancelled = "cancelado"


class StockStatus(str, Enum):
    pending = "pendente"
    arrived = "chegou"


def _any_to_any(values: Iterable[Enum]) -> Dict[str, List[str]]:
    names = [v.value for v in values]
    return {name: list(names) for name in names}


# Line item statuses are free-form writes: every value may move to every other
# value, backwards included. Swap these tables to enforce a stricter lifecycle.
PAYMENT_TRANSITIONS = _any_to_any(PaymentStatus)
STOCK_TRANSITIONS = _any_to_any(StockStatus)


def can_transition(transitions: Dict[str, List[str]], current: str, new: str) -> bool:
    if current == new:
        return True
    return new in transitions.get(current, [])


def order_payment_status(item_statuses: List[str]) -> str:
    """Customer-facing aggregate: cancelled only when every line is cancelled."""
    if item_statuses and all(s == PaymentStatus.cancelled.value for s in item_statuses):
        return PaymentStatus.cancelled.value
    return PaymentStatus.pending.value


def admin_payment_status(item_statuses: List[str]) -> str:
    """Back-office aggregate: pending while any line is pending, otherwise paid."""
    if any(s == PaymentStatus.pending.value for s in item_statuses):
        return PaymentStatus.pending.value
    return PaymentStatus.paid.value
