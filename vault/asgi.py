"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager (ex: gunicorn -k uvicorn.workers.UvicornWorker) importe `vault.asgi:app`.
- Toute la configuration FastAPI est centralisée dans vault.app_setup.factory.
"""

from vault.app import app

__all__ = ["app"]
