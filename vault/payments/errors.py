"""
Taxonomie d'erreurs du coeur paiement/commande.
- InvalidCart -> 400 {"error": "Invalid cart"} (récupérable côté client)
- GatewayError (indisponible / exception SDK / résultat nul) -> 500
- PersistError -> 500 (paiement capturé mais commande absente)
- Unauthenticated -> 500 (identité acheteur absente du contexte)
Chaque erreur conserve l'exception d'origine dans .cause.
"""
from typing import Any, Dict, Optional


class PaymentCoreError(Exception):
    status_code = 500

    def __init__(self, message: str = "", cause: Optional[BaseException] = None):
        super().__init__(message or (str(cause) if cause is not None else self.__class__.__name__))
        self.cause = cause

    def payload(self) -> Dict[str, Any]:
        """Corps de réponse: l'erreur d'origine si connue, sinon l'erreur catégorisée."""
        source = self.cause if self.cause is not None else self
        return {"name": type(source).__name__, "message": str(source)}


class InvalidCart(PaymentCoreError):
    status_code = 400

    def payload(self) -> Dict[str, Any]:
        return {"error": "Invalid cart"}


class Unauthenticated(PaymentCoreError):
    pass


class PersistError(PaymentCoreError):
    pass


class GatewayError(PaymentCoreError):
    pass


class GatewayUnavailable(GatewayError):
    """Erreur réseau / authentification / serveur remontée par le SDK."""


class GatewayThrew(GatewayError):
    """Toute autre exception levée par le SDK."""


class GatewayNullResult(GatewayError):
    """Le SDK n'a produit ni erreur ni résultat."""
