from fastapi import FastAPI
from vault.config import SUPABASE_URL, COOKIE_SECURE

# Drop-in Braintree et Swagger UI
GATEWAY_SOURCES = ["https://js.braintreegateway.com", "https://assets.braintreegateway.com", "https://api.braintreegateway.com", "https://js.stripe.com"]
SWAGGER_CDNS = ["https://cdn.jsdelivr.net", "https://unpkg.com"]

def build_csp() -> str:
    csp_connect = ["'self'"]
    if SUPABASE_URL:
        csp_connect.append(SUPABASE_URL.rstrip("/"))
    csp_connect.extend(GATEWAY_SOURCES)
    scripts = SWAGGER_CDNS + GATEWAY_SOURCES
    return (
        "default-src 'self'; "
        "base-uri 'self'; object-src 'none'; frame-ancestors 'none'; "
        "img-src 'self' data: blob: https://fastapi.tiangolo.com; "
        f"style-src 'self' 'unsafe-inline' {' '.join(SWAGGER_CDNS)}; "
        f"script-src 'self' 'unsafe-inline' {' '.join(scripts)}; "
        f"frame-src {' '.join(GATEWAY_SOURCES)}; "
        f"connect-src {' '.join(csp_connect)}"
    )

def register_security_middleware(app: FastAPI) -> None:
    csp = build_csp()

    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)

        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        if COOKIE_SECURE:
            response.headers.setdefault("Strict-Transport-Security", "max-age=63072000; includeSubDomains; preload")
        # Les réponses de paiement ne doivent jamais être mises en cache
        if request.url.path.startswith("/api/"):
            response.headers.setdefault("Cache-Control", "no-store")
        response.headers["Content-Security-Policy"] = csp
        return response
