# vault.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

"""
Configuration centrale du backend Virtual Vault.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env), une seule fois au démarrage
- Normalise et expose les secrets/URLs (Supabase, Braintree, Stripe)
- Expose les réglages CORS/hosts et sécurité
Les identifiants de la passerelle ne doivent jamais apparaître dans les réponses ni dans les logs.
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

# Base de données (Supabase / PostgREST): URL + clés
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or os.getenv("DATABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Passerelle de paiement: "braintree" (défaut) ou "stripe"
PAYMENT_GATEWAY = _clean_env(os.getenv("PAYMENT_GATEWAY") or "braintree").lower()

# Braintree: environnement + identifiants marchand
BRAINTREE_ENVIRONMENT = _clean_env(os.getenv("BRAINTREE_ENVIRONMENT") or "sandbox").lower()
BRAINTREE_MERCHANT_ID = _clean_env(os.getenv("BRAINTREE_MERCHANT_ID") or "")
BRAINTREE_PUBLIC_KEY = _clean_env(os.getenv("BRAINTREE_PUBLIC_KEY") or "")
BRAINTREE_PRIVATE_KEY = _clean_env(os.getenv("BRAINTREE_PRIVATE_KEY") or "")

# Stripe: clé secrète + devise unique des ventes
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
PAYMENT_CURRENCY = _clean_env(os.getenv("PAYMENT_CURRENCY") or "usd").lower()

# Cookies / sécurité
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]
