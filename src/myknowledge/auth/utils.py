import logging
import textwrap
from typing import List, Optional

from fastapi import HTTPException, Request, status
from fastapi.security.utils import get_authorization_scheme_param
from jose import jwt, JWTError
from jose.exceptions import JOSEError

from myknowledge.config import (
    CLERK_JWT_KEY, CLERK_AUTHORIZED_PARTIES, ALGORITHMS, JWT_CLOCK_SKEW_SECONDS
)

logger = logging.getLogger(__name__)

PEM_HEADER = "-----BEGIN PUBLIC KEY-----"
PEM_FOOTER = "-----END PUBLIC KEY-----"


def load_jwt_key(raw_key: Optional[str]) -> Optional[str]:
    """
    Normalizes the configured verification key to PEM.

    The key is commonly pasted into env files either with literal "\\n"
    sequences or as the bare base64 body copied from the Clerk dashboard.
    """
    if not raw_key:
        return None
    key = raw_key.strip().replace("\\n", "\n")
    if key.startswith("-----BEGIN"):
        return key
    body = "".join(key.split())
    return "\n".join([PEM_HEADER, *textwrap.wrap(body, 64), PEM_FOOTER])


def auth_error(detail: str, reason: Optional[str] = None) -> HTTPException:
    content = {"error": detail}
    if reason:
        content["details"] = reason
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=content,
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthHelper:
    def __init__(self, jwt_key: Optional[str] = CLERK_JWT_KEY,
                 authorized_parties: Optional[List[str]] = None,
                 leeway: int = JWT_CLOCK_SKEW_SECONDS):
        self.jwt_key = load_jwt_key(jwt_key)
        self.authorized_parties = list(authorized_parties if authorized_parties is not None else CLERK_AUTHORIZED_PARTIES)
        self.leeway = leeway

    def _validate_token_and_get_payload(self, token: str) -> dict:
        if not self.jwt_key:
            logger.error("[AuthHelper_FATAL_ERROR] CLERK_JWT_KEY is not configured.")
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Auth service config error")

        try:
            payload = jwt.decode(
                token, self.jwt_key, algorithms=ALGORITHMS,
                options={"verify_aud": False, "leeway": self.leeway}
            )
        except JWTError as e:
            logger.warning(f"[AuthHelper_VALIDATION_ERROR] JWT Error: {e}")
            raise auth_error("Invalid token", str(e))
        except JOSEError as e:
            logger.warning(f"[AuthHelper_VALIDATION_ERROR] JOSE Error: {e}")
            raise auth_error("Invalid token", str(e))

        authorized_party = payload.get("azp")
        if authorized_party and self.authorized_parties and authorized_party not in self.authorized_parties:
            logger.warning(f"[AuthHelper_VALIDATION_ERROR] Unauthorized party: {authorized_party}")
            raise auth_error("Invalid token", "Invalid authorized party")
        return payload

    def extract_bearer_token(self, authorization: Optional[str]) -> str:
        if not authorization:
            raise auth_error("Authorization header missing")
        scheme, token = get_authorization_scheme_param(authorization)
        if scheme.lower() != "bearer" or not token or " " in token:
            raise auth_error("Invalid token", "Malformed authorization header")
        return token

    async def get_current_user_id(self, request: Request) -> str:
        token = self.extract_bearer_token(request.headers.get("Authorization"))
        payload = self._validate_token_and_get_payload(token)
        user_id = payload.get("sub")
        if not user_id:
            raise auth_error("Invalid token", "User ID (sub) not in token")
        return user_id
