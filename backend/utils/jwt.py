from datetime import datetime, timedelta

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

# -------------------------------
# Verification failures
# -------------------------------
# All of these mean "unauthenticated" to a client; the subclass
# is kept for logs.

class TokenError(Exception):
    reason = "invalid"


class MalformedToken(TokenError):
    reason = "malformed"


class ExpiredToken(TokenError):
    reason = "expired"


class BadSignature(TokenError):
    reason = "bad_signature"


REQUIRED_CLAIMS = ("sub", "email")


class TokenManager:
    """
    Issues and verifies signed bearer tokens.

    The signing secret is handed in at construction so separate
    instances (and tests) can run with independent secrets.
    """

    def __init__(
        self,
        secret: str | None,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(days=7),
    ):
        secret = (secret or "").strip()
        if not secret:
            raise RuntimeError("JWT_SECRET is not configured")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, claims: dict, ttl: timedelta | None = None) -> str:
        missing = [c for c in REQUIRED_CLAIMS if not claims.get(c)]
        if missing:
            raise ValueError(f"Missing token claims: {', '.join(missing)}")

        now = datetime.utcnow()
        payload = claims.copy()
        payload.update({
            "sub": str(claims["sub"]),
            "iat": now,
            "exp": now + (self.ttl if ttl is None else ttl),
        })
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        try:
            jwt.get_unverified_header(token)
        except JWTError as exc:
            raise MalformedToken(str(exc)) from exc

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"leeway": 0},
            )
        except ExpiredSignatureError as exc:
            raise ExpiredToken(str(exc)) from exc
        except JWTClaimsError as exc:
            raise MalformedToken(str(exc)) from exc
        except JWTError as exc:
            raise BadSignature(str(exc)) from exc

        if any(not payload.get(c) for c in REQUIRED_CLAIMS):
            raise MalformedToken("Token payload is missing identity claims")

        return payload
