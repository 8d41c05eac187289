from fastapi import Request, HTTPException, Depends
from typing import Optional, Dict, Any

def extract_token(request: Request) -> Optional[str]:
    """
    Lit le jeton d'accès dans l'en-tête Authorization.
    - Accepte "Bearer <token>" et le jeton brut (ancien storefront).
    """
    auth_header = (request.headers.get("Authorization") or "").strip()
    # "Bearer" seul (jeton vide) ne vaut pas jeton brut
    if auth_header == "Bearer" or auth_header.startswith("Bearer "):
        return auth_header[len("Bearer"):].strip() or None
    return auth_header or None

def get_current_user(request: Request) -> Dict[str, Any]:
    token = extract_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Non authentifié")

    try:
        # Délégué au service Auth
        from vault.auth.service import get_user_from_token as _svc_get_user_from_token
        user = _svc_get_user_from_token(token)
        if not user.get("id"):
            raise HTTPException(status_code=401, detail="Session expirée, veuillez vous connecter")
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=401, detail="Session expirée, veuillez vous connecter")

    # Identité acheteur attachée au contexte de la requête
    request.state.user = user
    return user

def require_user(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user

def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Accès interdit")
    return user
