"""
Logique panier pure (pas de passerelle, pas de DB).
"""
import math
from typing import Any, List, NamedTuple

from .errors import InvalidCart


class PricedCart(NamedTuple):
    cart: List[Any]
    amount: float


# module vault.payments.cart
def coerce_price(value: Any) -> float:
    """
    Conversion numérique d'un prix client.
    - Autorise int|float|str numérique.
    - Retourne 0.0 si la conversion échoue ou donne une valeur non finie.
    - Les séparateurs "_" ("1_000") ne sont pas un format de prix: 0.0.
    """
    if isinstance(value, str) and "_" in value:
        return 0.0
    try:
        price = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(price):
        return 0.0
    return price

def line_price(line: Any) -> float:
    if not isinstance(line, dict):
        return 0.0
    return coerce_price(line.get("price"))

def price_cart(raw: Any) -> PricedCart:
    """
    Valide le panier soumis et calcule le montant de la vente.
    - Soulève InvalidCart si raw n'est pas une liste non vide.
    - Somme des prix coercés, sans arrondi (la passerelle arrondit à son unité).
    - Les prix négatifs ne sont pas rejetés ici.
    - Ne modifie pas le panier: PricedCart.cart est la liste soumise.
    """
    if not isinstance(raw, list) or not raw:
        raise InvalidCart("Invalid cart")
    total = 0.0
    for line in raw:
        total += line_price(line)
    return PricedCart(cart=raw, amount=total)
