"""
Registre central des routers.
- API v1: payments (/api/v1/product), orders (/api/v1/auth)
- Health: health_router
"""
from fastapi import FastAPI
from vault.payments import views as payments_views
from vault.orders import views as orders_views
from vault.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    """Agrège tous les routers; les préfixes évitent les conflits de chemins."""
    # API v1
    app.include_router(payments_views.router)
    app.include_router(orders_views.router)
    # Health & monitoring
    app.include_router(health_router)
