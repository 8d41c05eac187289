"""
Gestionnaires d'exceptions de l'API.
- HTTPException: corps JSON {"detail": ...} standard FastAPI, 401/403 journalisés.
- Exception non gérée: 500 {"name", "message"}, même forme que les erreurs de paiement.
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    """Enregistre les handlers HTTPException et Exception."""
    @app.exception_handler(HTTPException)
    async def json_http_errors(request: Request, exc: HTTPException):
        if exc.status_code in (401, 403):
            logger.warning("http.auth_denied status=%s path=%s", exc.status_code, request.url.path)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def json_unhandled_errors(request: Request, exc: Exception):
        logger.exception("http.unhandled path=%s", request.url.path)
        return JSONResponse(status_code=500, content={"name": type(exc).__name__, "message": str(exc)})
