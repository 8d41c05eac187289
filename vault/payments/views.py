# module vault.payments.views

"""Endpoints de paiement (storefront -> passerelle).
- GET /braintree/token: jeton client pour le drop-in (non authentifié).
- POST /braintree/payment: finalise l'achat {nonce, cart} pour l'acheteur connecté.
Sécurité:
- require_user: l'identité acheteur provient du jeton, jamais du body.
- optional_rate_limit: limite la fréquence des tentatives de paiement.
"""
import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from vault.utils.security import require_user
from vault.utils.rate_limit import optional_rate_limit
from vault.payments import service as payments_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/product", tags=["Payments API"])


async def _read_body(request: Request) -> Dict[str, Any]:
    """Body JSON attendu sous forme d'objet; tout autre contenu équivaut à un body vide."""
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("payments.views.invalid_json path=%s", request.url.path)
        return {}
    return body if isinstance(body, dict) else {}


@router.get("/braintree/token")
async def braintree_token():
    reply = await payments_service.issue_client_token()
    return JSONResponse(status_code=reply.status_code, content=reply.body)


@router.post("/braintree/payment", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def braintree_payment(
    request: Request,
    user: dict = Depends(require_user),
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
):
    """
    Finalise l'achat du panier.
    - Entrée JSON: { "nonce": "<nonce passerelle>", "cart": [ { "_id": "...", "price": 29.99, ... }, ... ] }
    - En-tête optionnel Idempotency-Key: rejouer la même clé ne recrée ni vente ni commande.
    - Réponses: 200 {"ok": true} | 400 {"error": "Invalid cart"} | 500 <erreur passerelle/persistance>
    - Un 500 signifie "paiement non confirmé": ne pas réessayer automatiquement.
    """
    body = await _read_body(request)
    reply = await payments_service.finalize(
        user,
        body.get("nonce"),
        body.get("cart"),
        idempotency_key=idempotency_key,
    )
    return JSONResponse(status_code=reply.status_code, content=reply.body)
