"""Diagnostics de connectivité Supabase (DNS + accès à la table des commandes)."""
from typing import Any, Dict
from urllib.parse import urlparse
import socket

import vault.infra.supabase_client as supabase_client
from vault.config import SUPABASE_URL
from vault.orders.repository import TABLE as ORDERS_TABLE


def _check_table(client, name: str) -> Dict[str, Any]:
    try:
        res = client.table(name).select("id").limit(1).execute()
        return {"ok": True, "rows": len(res.data or [])}
    except Exception as e:
        return {"ok": False, "error": str(e)}


def health_supabase_info() -> Dict[str, Any]:
    parsed = urlparse(SUPABASE_URL) if SUPABASE_URL else None
    hostname = parsed.hostname if parsed else None
    dns_ok = None
    dns_error = None
    if hostname:
        try:
            socket.getaddrinfo(hostname, 443)
            dns_ok = True
        except OSError as e:
            dns_ok = False
            dns_error = str(e)

    info: Dict[str, Any] = {
        "supabase_url": SUPABASE_URL,
        "hostname": hostname,
        "dns_ok": dns_ok,
        "dns_error": dns_error,
        "connect_ok": False,
        "error": None,
        "tables": {},
    }
    try:
        client = supabase_client.get_supabase()
        info["tables"][ORDERS_TABLE] = _check_table(client, ORDERS_TABLE)
        info["connect_ok"] = True
    except Exception as e:
        info["error"] = str(e)
    return info
