"""
Limitation de fréquence optionnelle (tentatives de paiement, endpoints sensibles).
- Redis via fastapi-limiter quand le lifespan l'a initialisé.
- LOCAL_RATE_LIMIT_FALLBACK=1: fenêtre glissante en mémoire (dev, mono-process).
- rate_limit_enabled=False (tests, Redis absent): aucune limite.
"""
from typing import Any, Callable, Dict, List
from urllib.parse import urlparse
import hashlib
import logging
import os
import time

from fastapi import HTTPException, Request, Response

logger = logging.getLogger(__name__)

KEY_PREFIX = "vault:rl"


def limit_key(req: Request) -> str:
    """Clé de limitation: jeton Authorization hashé (acheteur) sinon IP, par chemin."""
    token = (req.headers.get("Authorization") or "").strip()
    path = req.url.path
    if token:
        digest = hashlib.sha256(token.encode("utf-8")).hexdigest()[:16]
        return f"{KEY_PREFIX}:user:{digest}:{path}"
    ip = req.client.host if req.client else "local"
    return f"{KEY_PREFIX}:ip:{ip}:{path}"


def _local_hit(request: Request, key: str, times: int, seconds: int) -> None:
    now = time.time()
    store: Dict[str, List[float]] = getattr(request.app.state, "_rl_store", None) or {}
    hits = [t for t in store.get(key, []) if now - t < seconds]
    if len(hits) >= times:
        logger.warning("rate_limit.local.exceeded key=%s", key)
        raise HTTPException(status_code=429, detail="Too Many Requests")
    hits.append(now)
    store[key] = hits
    request.app.state._rl_store = store


def optional_rate_limit(times: int, seconds: int) -> Callable[..., Any]:
    """Dépendance FastAPI: `Depends(optional_rate_limit(times=10, seconds=60))`."""
    async def _dep(request: Request, response: Response):
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            _local_hit(request, limit_key(request), times, seconds)
            return

        if getattr(request.app.state, "rate_limit_enabled", None) is False:
            return

        try:
            from fastapi_limiter.depends import RateLimiter

            async def _identifier(req: Request) -> str:
                return limit_key(req)

            return await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
        except HTTPException:
            raise
        except Exception as e:
            # Limiteur non initialisé ou Redis injoignable: pas de 429
            logger.warning("rate_limit.redis.unavailable path=%s err=%s", request.url.path, e)
            return
    return _dep


def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    """État effectif du rate limiting, sans exposer d'identifiants Redis."""
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    local = os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1"

    from fastapi_limiter import FastAPILimiter
    redis_ready = getattr(FastAPILimiter, "redis", None) is not None

    backend = "memory" if local else ("redis" if redis_ready else None)
    info: Dict[str, Any] = {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": bool(local or redis_ready),
        "backend": backend,
    }

    redis_url = os.getenv("RATE_LIMIT_REDIS_URL")
    if backend == "redis" and redis_url:
        p = urlparse(redis_url)
        info["redis"] = {"scheme": p.scheme, "host": p.hostname, "port": p.port}
    return info
