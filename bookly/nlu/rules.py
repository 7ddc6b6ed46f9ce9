"""Rule-based intent classifier.

Rules are (predicate, label) pairs evaluated in order; the first match wins.
Order matters: "cancel my order and refund me" is cancel_order, not returns.
"""
from typing import Callable, List, Tuple

ORDER_STATUS = "order_status"
CANCEL_ORDER = "cancel_order"
RETURNS = "returns"
SHIPPING = "shipping"
ACCOUNT = "account"
GENERAL = "general"

INTENTS = (ORDER_STATUS, CANCEL_ORDER, RETURNS, SHIPPING, ACCOUNT, GENERAL)
ORDER_INTENTS = (ORDER_STATUS, CANCEL_ORDER)

Predicate = Callable[[str], bool]


def _contains_all(*words: str) -> Predicate:
    return lambda q: all(w in q for w in words)


def _contains_any(*words: str) -> Predicate:
    return lambda q: any(w in q for w in words)


def _both(first: Predicate, second: Predicate) -> Predicate:
    return lambda q: first(q) and second(q)


INTENT_RULES: List[Tuple[Predicate, str]] = [
    (_both(_contains_all("order"), _contains_any("status", "where", "track")), ORDER_STATUS),
    (_contains_all("cancel", "order"), CANCEL_ORDER),
    (_contains_any("return", "refund"), RETURNS),
    (_contains_any("ship", "deliver"), SHIPPING),
    (_contains_any("password", "reset", "login"), ACCOUNT),
]


def classify_intent(query: str, rules: List[Tuple[Predicate, str]] = None) -> str:
    q = (query or "").lower()
    for predicate, label in rules or INTENT_RULES:
        if predicate(q):
            return label
    return GENERAL
