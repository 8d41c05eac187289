# module vault.orders.models
"""Modèle des commandes.
- OrderStatus: cycle de vie (valeurs stockées telles quelles, y compris "deliverd").
- build_order_document: document persisté par le finaliseur (état initial "Not Process").
- can_transition: transitions autorisées pour la mise à jour admin.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class OrderStatus(str, Enum):
    NOT_PROCESS = "Not Process"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "deliverd"
    CANCELLED = "cancel"


ALLOWED_TRANSITIONS = {
    OrderStatus.NOT_PROCESS: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


class OrderStatusUpdate(BaseModel):
    status: str


def parse_status(value: Any) -> Optional[OrderStatus]:
    try:
        return OrderStatus(value)
    except ValueError:
        return None

def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Une ré-écriture du même statut est acceptée; un état terminal n'évolue plus."""
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]

def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def build_order_document(
    *,
    buyer: str,
    products: List[Any],
    payment: Dict[str, Any],
    idempotency_key: Optional[str] = None,
) -> Dict[str, Any]:
    now = utc_now_iso()
    document: Dict[str, Any] = {
        "products": products,
        "payment": payment,
        "buyer": buyer,
        "status": OrderStatus.NOT_PROCESS.value,
        "created_at": now,
        "updated_at": now,
    }
    if idempotency_key:
        document["idempotency_key"] = idempotency_key
    return document
