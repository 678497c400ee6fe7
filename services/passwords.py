from fastapi import Request
from passlib.context import CryptContext

from .config import BCRYPT_ROUNDS


class PasswordHasher:
    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.pwd_context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    def hash(self, plain_password: str) -> str:
        return self.pwd_context.hash(plain_password)

    def verify(self, plain_password: str, hashed_password) -> bool:
        if not hashed_password or not isinstance(hashed_password, str):
            return False
        # Records that predate hashing hold plaintext, which passlib cannot identify.
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            return False


def get_passwords(request: Request) -> PasswordHasher:
    return request.app.state.passwords
