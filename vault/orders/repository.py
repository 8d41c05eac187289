"""
Accès aux données pour la feature 'orders' (table Supabase 'orders').
- Les écritures du finaliseur propagent les erreurs (l'appelant décide de la réponse).
- Les lectures de listing renvoient des valeurs neutres ([], None) en cas d'erreur.
"""
from typing import Any, Dict, List, Optional
import logging
import vault.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

TABLE = "orders"

# module vault.orders.repository
def insert_order(document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Insère une commande via service-role et retourne la ligne créée.
    - Soulève l'erreur Supabase telle quelle, ou RuntimeError si aucune ligne n'est renvoyée.
    """
    res = (
        supabase_client.get_service_supabase()
        .table(TABLE)
        .insert(document)
        .execute()
    )
    rows = res.data or []
    if not rows:
        raise RuntimeError("orders insert returned no row")
    return rows[0]

def find_order_by_idempotency_key(buyer: str, idempotency_key: str) -> Optional[Dict[str, Any]]:
    res = (
        supabase_client.get_service_supabase()
        .table(TABLE)
        .select("id, status, created_at")
        .eq("buyer", buyer)
        .eq("idempotency_key", idempotency_key)
        .limit(1)
        .execute()
    )
    rows = res.data or []
    return rows[0] if rows else None

def fetch_buyer_orders(buyer: str, limit: int = 50) -> List[Dict[str, Any]]:
    """Commandes d'un acheteur, les plus récentes d'abord."""
    if not buyer:
        return []
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .select("*")
            .eq("buyer", buyer)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("orders.repository.fetch_buyer_orders failed buyer=%s", buyer)
        return []

def fetch_all_orders(limit: int = 100) -> List[Dict[str, Any]]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .select("*")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("orders.repository.fetch_all_orders failed")
        return []

def get_order_by_id(order_id: str) -> Optional[Dict[str, Any]]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .select("*")
            .eq("id", order_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("orders.repository.get_order_by_id failed order_id=%s", order_id)
        return None

def update_order_status(order_id: str, status: str, updated_at: str) -> Optional[Dict[str, Any]]:
    try:
        res = (
            supabase_client.get_service_supabase()
            .table(TABLE)
            .update({"status": status, "updated_at": updated_at})
            .eq("id", order_id)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("orders.repository.update_order_status failed order_id=%s", order_id)
        return None
