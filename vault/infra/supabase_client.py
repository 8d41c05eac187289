import logging
from typing import Optional
from supabase import create_client, Client
from vault.config import SUPABASE_URL, SUPABASE_ANON, SUPABASE_SERVICE_KEY

logger = logging.getLogger(__name__)

_supabase: Optional[Client] = None
_service_supabase: Optional[Client] = None

def _build(key: str, role: str) -> Client:
    if not SUPABASE_URL:
        raise RuntimeError("SUPABASE_URL manquant: base des commandes injoignable")
    client = create_client(SUPABASE_URL, key)
    logger.info("infra.supabase.client_ready role=%s", role)
    return client

def get_supabase() -> Client:
    """Client 'anon' partagé: vérification des jetons (auth.get_user) et health."""
    global _supabase
    if _supabase is None:
        _supabase = _build(SUPABASE_ANON, "anon")
    return _supabase

def get_service_supabase() -> Client:
    """
    Client service-role partagé (bypass RLS) pour la table des commandes.
    Construit une seule fois par process, en lecture seule ensuite.
    """
    global _service_supabase
    if not SUPABASE_SERVICE_KEY:
        raise RuntimeError("SUPABASE_SERVICE_KEY manquant pour get_service_supabase()")
    if _service_supabase is None:
        _service_supabase = _build(SUPABASE_SERVICE_KEY, "service")
    return _service_supabase
