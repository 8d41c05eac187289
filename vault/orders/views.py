# module vault.orders.views

"""Endpoints commandes côté compte/admin.
- GET /orders: commandes de l'acheteur connecté.
- GET /all-orders: toutes les commandes (admin).
- PUT /order-status/{order_id}: changement de statut (admin), cycle de vie respecté.
"""
from typing import Any, Dict, List
from fastapi import APIRouter, Depends

from vault.utils.security import require_user, require_admin
from vault.orders import service as orders_service
from vault.orders.models import OrderStatusUpdate

router = APIRouter(prefix="/api/v1/auth", tags=["Orders API"])


@router.get("/orders")
def get_orders(user: Dict[str, Any] = Depends(require_user)) -> List[Dict[str, Any]]:
    return orders_service.list_buyer_orders(user.get("id"))


@router.get("/all-orders")
def get_all_orders(user: Dict[str, Any] = Depends(require_admin)) -> List[Dict[str, Any]]:
    return orders_service.list_all_orders()


@router.put("/order-status/{order_id}")
def update_order_status(order_id: str, body: OrderStatusUpdate, user: Dict[str, Any] = Depends(require_admin)) -> Dict[str, Any]:
    return orders_service.change_order_status(order_id, body.status)
