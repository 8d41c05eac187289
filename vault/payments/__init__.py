"""
Module 'payments' (feature-first): point d'entrée public.
Réunit validation panier, adaptateur passerelle et finalisation des commandes.
"""

from .cart import PricedCart, coerce_price, price_cart
from .errors import (
    PaymentCoreError,
    InvalidCart,
    Unauthenticated,
    PersistError,
    GatewayError,
    GatewayUnavailable,
    GatewayThrew,
    GatewayNullResult,
)
from .gateway import PaymentGateway, call_gateway, get_gateway
from .service import Reply, finalize, issue_client_token

__all__ = [
    # cart
    "PricedCart",
    "coerce_price",
    "price_cart",
    # errors
    "PaymentCoreError",
    "InvalidCart",
    "Unauthenticated",
    "PersistError",
    "GatewayError",
    "GatewayUnavailable",
    "GatewayThrew",
    "GatewayNullResult",
    # gateway
    "PaymentGateway",
    "call_gateway",
    "get_gateway",
    # services
    "Reply",
    "finalize",
    "issue_client_token",
]
