from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import jwt, JWTError
from storefront.core.config import settings


ALGORITHM = "HS256"


'''
Sign a JWT for the auth cookie
  - the login flow lives in the account service; here we only sign and verify
  - no server-side session row is created
'''
def create_access_token(subject: dict[str, Any], expires_minutes: int | None = None) -> str:
    expire = datetime.now(tz=timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode = {"exp": expire, **subject}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[dict[str, Any]]:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
