"""
Adaptateur passerelle de paiement.
- Deux opérations exposées en async: issue_client_token() et charge_sale(amount, nonce).
- Le SDK (bloquant) est exécuté dans le threadpool via call_gateway(), qui résout
  exactement une fois: un résultat, ou une GatewayError catégorisée.
- SDK interchangeables (PAYMENT_GATEWAY): Braintree (défaut) ou Stripe.
- Une seule instance par process (get_gateway), construite depuis la configuration.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, Optional

import braintree
import requests
import stripe
from braintree.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    GatewayTimeoutError,
    RequestTimeoutError,
    ServerError,
    ServiceUnavailableError,
    TooManyRequestsError,
    UnexpectedError,
    UpgradeRequiredError,
)
from starlette.concurrency import run_in_threadpool

from vault import config
from .errors import GatewayError, GatewayNullResult, GatewayThrew, GatewayUnavailable

logger = logging.getLogger(__name__)

# Erreurs SDK considérées comme "passerelle indisponible" (réseau, auth, serveur)
UNAVAILABLE_ERRORS = (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    GatewayTimeoutError,
    RequestTimeoutError,
    ServerError,
    ServiceUnavailableError,
    TooManyRequestsError,
    UnexpectedError,
    UpgradeRequiredError,
    stripe.APIConnectionError,
    stripe.AuthenticationError,
    stripe.PermissionError,
    stripe.RateLimitError,
    stripe.APIError,
    requests.exceptions.RequestException,
    ConnectionError,
    TimeoutError,
)

BRAINTREE_ENVIRONMENTS = {
    "sandbox": braintree.Environment.Sandbox,
    "production": braintree.Environment.Production,
}

# module vault.payments.gateway
def format_amount(amount: float) -> str:
    """Montant décimal à 2 chiffres après la virgule (ex: 79.98 -> "79.98")."""
    return str(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

def to_minor_units(amount: str) -> int:
    return int(Decimal(amount) * 100)

async def call_gateway(operation: Callable[..., Any], *args: Any) -> Any:
    """
    Pont SDK bloquant -> awaitable.
    - Toute exception levée par le SDK est catégorisée (jamais propagée telle quelle).
    - Un résultat vide (None / "") devient GatewayNullResult.
    """
    try:
        result = await run_in_threadpool(operation, *args)
    except GatewayError:
        raise
    except UNAVAILABLE_ERRORS as e:
        raise GatewayUnavailable(cause=e) from e
    except Exception as e:
        raise GatewayThrew(cause=e) from e
    if result is None or result == "":
        raise GatewayNullResult("Gateway returned neither error nor result")
    return result


def _braintree_transaction_to_dict(transaction: Any) -> Dict[str, Any]:
    created_at = getattr(transaction, "created_at", None)
    amount = getattr(transaction, "amount", None)
    return {
        "id": getattr(transaction, "id", None),
        "status": getattr(transaction, "status", None),
        "amount": str(amount) if amount is not None else None,
        "currency_iso_code": getattr(transaction, "currency_iso_code", None),
        "processor_response_code": getattr(transaction, "processor_response_code", None),
        "processor_response_text": getattr(transaction, "processor_response_text", None),
        "payment_instrument_type": getattr(transaction, "payment_instrument_type", None),
        "created_at": created_at.isoformat() if hasattr(created_at, "isoformat") else created_at,
    }

def braintree_result_to_dict(result: Any) -> Dict[str, Any]:
    """
    Instantané JSON du résultat Braintree, stocké tel quel sur la commande.
    - success + transaction pour une vente approuvée
    - message + errors (deep_errors) + transaction éventuelle pour un refus
    """
    snapshot: Dict[str, Any] = {"success": bool(getattr(result, "is_success", False))}
    transaction = getattr(result, "transaction", None)
    if transaction is not None:
        snapshot["transaction"] = _braintree_transaction_to_dict(transaction)
    if not snapshot["success"]:
        snapshot["message"] = getattr(result, "message", None)
        errors = getattr(result, "errors", None)
        snapshot["errors"] = [
            {"attribute": getattr(e, "attribute", None), "code": getattr(e, "code", None), "message": getattr(e, "message", None)}
            for e in (getattr(errors, "deep_errors", None) or [])
        ]
    return snapshot


class BraintreeBinding:
    """Accès SDK Braintree; le BraintreeGateway est construit au premier appel puis réutilisé."""

    name = "braintree"

    def __init__(self, environment: str, merchant_id: str, public_key: str, private_key: str):
        self._environment = environment
        self._merchant_id = merchant_id
        self._public_key = public_key
        self._private_key = private_key
        self._sdk: Optional[braintree.BraintreeGateway] = None

    def sdk(self) -> braintree.BraintreeGateway:
        if self._sdk is None:
            environment = BRAINTREE_ENVIRONMENTS.get(self._environment, braintree.Environment.Sandbox)
            self._sdk = braintree.BraintreeGateway(
                braintree.Configuration(
                    environment=environment,
                    merchant_id=self._merchant_id,
                    public_key=self._public_key,
                    private_key=self._private_key,
                )
            )
        return self._sdk

    def generate_client_token(self) -> Optional[str]:
        return self.sdk().client_token.generate()

    def sale(self, amount: str, nonce: Optional[str]) -> Optional[Dict[str, Any]]:
        result = self.sdk().transaction.sale({
            "amount": amount,
            "payment_method_nonce": nonce,
            "options": {"submit_for_settlement": True},
        })
        if result is None:
            return None
        return braintree_result_to_dict(result)


class StripeBinding:
    """
    Accès SDK Stripe.
    - Jeton client: client_secret d'un SetupIntent (initialise Stripe Elements côté storefront).
    - Vente: PaymentIntent confirmé et capturé immédiatement (nonce = payment_method).
    """

    name = "stripe"

    def __init__(self, api_key: str, currency: str):
        self._api_key = api_key
        self._currency = currency

    def require_stripe(self):
        if self._api_key:
            stripe.api_key = self._api_key
        return stripe

    def generate_client_token(self) -> Optional[str]:
        intent = self.require_stripe().SetupIntent.create(payment_method_types=["card"])
        return getattr(intent, "client_secret", None)

    def sale(self, amount: str, nonce: Optional[str]) -> Optional[Dict[str, Any]]:
        intent = self.require_stripe().PaymentIntent.create(
            amount=to_minor_units(amount),
            currency=self._currency,
            payment_method=nonce,
            payment_method_types=["card"],
            confirm=True,
            capture_method="automatic",
        )
        if intent is None:
            return None
        status = getattr(intent, "status", None)
        return {
            "success": status == "succeeded",
            "transaction": {
                "id": getattr(intent, "id", None),
                "status": status,
                "amount": amount,
                "currency_iso_code": self._currency.upper(),
            },
        }


class PaymentGateway:
    """Adaptateur exposé au finaliseur; indépendant du SDK sous-jacent."""

    def __init__(self, binding: Any):
        self.binding = binding

    async def issue_client_token(self) -> str:
        return await call_gateway(self.binding.generate_client_token)

    def _sale(self, amount: float, nonce: Optional[str]) -> Optional[Dict[str, Any]]:
        # Le formatage du montant (Decimal) peut échouer: il reste dans le pont
        return self.binding.sale(format_amount(amount), nonce)

    async def charge_sale(self, amount: float, nonce: Optional[str]) -> Dict[str, Any]:
        return await call_gateway(self._sale, amount, nonce)


def build_gateway(provider: str) -> PaymentGateway:
    """Registre fournisseur -> binding SDK."""
    provider = (provider or "").lower()
    if provider == "stripe":
        return PaymentGateway(StripeBinding(config.STRIPE_SECRET_KEY, config.PAYMENT_CURRENCY))
    if provider == "braintree":
        return PaymentGateway(BraintreeBinding(
            config.BRAINTREE_ENVIRONMENT,
            config.BRAINTREE_MERCHANT_ID,
            config.BRAINTREE_PUBLIC_KEY,
            config.BRAINTREE_PRIVATE_KEY,
        ))
    raise ValueError(f"PAYMENT_GATEWAY inconnu: {provider!r}")


_gateway: Optional[PaymentGateway] = None

def get_gateway() -> PaymentGateway:
    global _gateway
    if _gateway is None:
        _gateway = build_gateway(config.PAYMENT_GATEWAY)
        logger.info("payments.gateway.ready provider=%s", _gateway.binding.name)
    return _gateway
