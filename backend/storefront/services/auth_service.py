from typing import Any, Dict

from fastapi import Depends, HTTPException, status, Request
from storefront.core.config import settings
from storefront.core.security import decode_token


COOKIE_NAME = settings.COOKIE_NAME


'''
获取当前登录用户
    - 从 Cookie 里拿到 token → decode_token(...)
    - the token is issued by the account service at login; payload carries
      user_id and the store_ids the user administers
    - no DB lookup: store ownership travels inside the signed token
'''
def get_current_user(request: Request) -> Dict[str, Any]:
    """从 Cookie 取出 JWT 并校验"""
    raw = request.cookies.get(COOKIE_NAME)
    if not raw:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    payload = decode_token(raw)
    if not payload or "user_id" not in payload:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return payload


def require_store_admin(store_id: str, current: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    """Admin routes are scoped by store_id in the path; the token must list that store."""
    store_ids = {str(s) for s in (current.get("store_ids") or [])}
    if store_id not in store_ids and not current.get("is_superuser"):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="No access to this store")
    return current
