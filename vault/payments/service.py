# module vault.payments.service
"""
Cas d'usage 'payments': finalisation d'un achat.
Receive -> Validate -> Charge -> Persist -> Reply; tout échec court-circuite vers une
réponse catégorisée. Aucune compensation après une vente capturée dont la commande
n'a pas pu être enregistrée (le client reçoit 500 et ne doit pas réessayer).
"""
from typing import Any, Dict, NamedTuple, Optional
import logging

from starlette.concurrency import run_in_threadpool

from vault.orders import repository as orders_repository
from vault.orders.models import build_order_document
from . import gateway as payments_gateway
from .cart import price_cart
from .errors import GatewayError, InvalidCart, PaymentCoreError, PersistError, Unauthenticated

logger = logging.getLogger(__name__)

OK_BODY = {"ok": True}


class Reply(NamedTuple):
    status_code: int
    body: Any


def require_buyer(user: Optional[Dict[str, Any]]) -> str:
    """Identité acheteur lue dans le contexte authentifié, jamais dans le body."""
    buyer = (user or {}).get("id")
    if not buyer:
        raise Unauthenticated("No buyer identity in request context")
    return str(buyer)

async def persist_order(
    buyer: str,
    products: Any,
    payment: Dict[str, Any],
    idempotency_key: Optional[str] = None,
) -> Dict[str, Any]:
    document = build_order_document(
        buyer=buyer,
        products=products,
        payment=payment,
        idempotency_key=idempotency_key,
    )
    try:
        return await run_in_threadpool(orders_repository.insert_order, document)
    except Exception as e:
        raise PersistError(cause=e) from e

async def already_finalized(buyer: str, idempotency_key: str) -> bool:
    try:
        existing = await run_in_threadpool(orders_repository.find_order_by_idempotency_key, buyer, idempotency_key)
    except Exception as e:
        raise PersistError(cause=e) from e
    return existing is not None

async def issue_client_token() -> Reply:
    """Jeton client pour le drop-in de la passerelle (aucune authentification requise)."""
    try:
        token = await payments_gateway.get_gateway().issue_client_token()
    except GatewayError as e:
        logger.exception("payments.token.gateway_failed kind=%s", type(e).__name__)
        return Reply(e.status_code, e.payload())
    return Reply(200, {"clientToken": token, "success": True})

async def finalize(
    user: Optional[Dict[str, Any]],
    nonce: Optional[str],
    raw_cart: Any,
    idempotency_key: Optional[str] = None,
) -> Reply:
    """
    Finalise un achat et renvoie la réponse HTTP à émettre.
    - 400 {"error": "Invalid cart"}: panier absent, vide ou mal formé (passerelle non appelée)
    - 500 <erreur passerelle>: vente non effectuée, aucune commande créée
    - 500 <erreur persistance>: vente capturée, commande absente
    - 200 {"ok": true}: une commande créée avec le résultat passerelle tel quel
    Le nonce est transmis tel quel (absent ou vide compris): la passerelle décide.
    Avec idempotency_key, une commande déjà créée pour cette clé répond 200 sans nouvelle vente.
    """
    buyer = None
    try:
        buyer = require_buyer(user)
        priced = price_cart(raw_cart)
        if idempotency_key and await already_finalized(buyer, idempotency_key):
            logger.info("payments.finalize.replayed buyer=%s", buyer)
            return Reply(200, OK_BODY)
        result = await payments_gateway.get_gateway().charge_sale(priced.amount, nonce)
        await persist_order(buyer, priced.cart, result, idempotency_key)
    except InvalidCart as e:
        logger.warning("payments.finalize.invalid_cart buyer=%s", buyer)
        return Reply(e.status_code, e.payload())
    except Unauthenticated as e:
        logger.error("payments.finalize.unauthenticated")
        return Reply(e.status_code, e.payload())
    except GatewayError as e:
        logger.exception("payments.finalize.gateway_failed buyer=%s kind=%s", buyer, type(e).__name__)
        return Reply(e.status_code, e.payload())
    except PersistError as e:
        logger.exception("payments.finalize.persist_failed buyer=%s", buyer)
        return Reply(e.status_code, e.payload())
    except Exception as e:
        logger.exception("payments.finalize.failed buyer=%s", buyer)
        return Reply(500, PaymentCoreError(cause=e).payload())

    logger.info("payments.finalize.ok buyer=%s amount=%s lines=%s", buyer, priced.amount, len(priced.cart))
    return Reply(200, OK_BODY)
