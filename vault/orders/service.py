"""Couche service des commandes (lecture acheteur/admin et changement de statut).
La création des commandes appartient au finaliseur (vault.payments.service).
"""
from typing import Any, Dict, List
import logging
from fastapi import HTTPException

from vault.orders import repository
from vault.orders.models import can_transition, parse_status, utc_now_iso

logger = logging.getLogger(__name__)

def list_buyer_orders(buyer: str) -> List[Dict[str, Any]]:
    return repository.fetch_buyer_orders(buyer)

def list_all_orders(limit: int = 100) -> List[Dict[str, Any]]:
    return repository.fetch_all_orders(limit=limit)

def change_order_status(order_id: str, status: str) -> Dict[str, Any]:
    """Applique un changement de statut admin en respectant le cycle de vie.
    - 400 si le statut est inconnu
    - 404 si la commande n'existe pas
    - 409 si la transition n'est pas autorisée (ex: depuis un état terminal)
    """
    target = parse_status(status)
    if target is None:
        raise HTTPException(status_code=400, detail=f"Statut inconnu: {status}")

    order = repository.get_order_by_id(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Commande introuvable")

    current = parse_status(order.get("status"))
    if current is None or not can_transition(current, target):
        raise HTTPException(
            status_code=409,
            detail=f"Transition interdite: {order.get('status')} -> {target.value}",
        )

    updated = repository.update_order_status(order_id, target.value, utc_now_iso())
    if not updated:
        raise HTTPException(status_code=500, detail="Echec de la mise à jour de la commande")
    logger.info("orders.status.updated order_id=%s from=%s to=%s", order_id, current.value, target.value)
    return updated
