from datetime import datetime, timedelta, timezone

from fastapi import Request
from jose import JWTError, jwt

from .config import ALGORITHM, TOKEN_TTL
from .errors import InvalidCredential


class TokenService:
    """Issue and verify the signed bearer tokens handed out at login."""

    def __init__(self, secret: str, ttl: timedelta = TOKEN_TTL, algorithm: str = ALGORITHM):
        self.secret = secret
        self.ttl = ttl
        self.algorithm = algorithm

    def issue(self, user_id: str, email: str, role: str) -> str:
        to_encode = {"userId": user_id, "email": email, "role": role}
        to_encode.update({"exp": datetime.now(timezone.utc) + self.ttl})
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidCredential(str(e)) from e
        if payload.get("userId") is None or payload.get("email") is None:
            raise InvalidCredential("Token payload is incomplete")
        return payload


def get_tokens(request: Request) -> TokenService:
    return request.app.state.tokens
