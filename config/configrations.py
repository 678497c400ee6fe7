import logging
import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi
from pymongo.errors import PyMongoError

from services.config import ALGORITHM, BCRYPT_ROUNDS, TOKEN_TTL

log = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = ("http://localhost:3000",)
CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]

_DURATION_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


class ConfigurationError(RuntimeError):
    """Raised when the process environment is missing a required setting."""


def parse_duration(value: str) -> timedelta:
    """Parse ``"24h"``, ``"30m"``, ``"7d"`` or a plain number of seconds."""
    match = re.fullmatch(r"\s*(\d+)\s*([smhd]?)\s*", value or "")
    if not match:
        raise ConfigurationError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit or "s"])


def parse_int(environ: Mapping[str, str], name: str, default: int) -> int:
    value = environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class Settings:
    mongo_uri: str
    database_name: str
    jwt_secret: str
    jwt_algorithm: str = ALGORITHM
    token_ttl: timedelta = TOKEN_TTL
    cors_origins: Tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)
    bcrypt_rounds: int = BCRYPT_ROUNDS
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from the process environment (and ``.env``)."""
        if environ is None:
            load_dotenv(override=False)
            environ = os.environ

        secret = environ.get("JWT_SECRET")
        if not secret:
            raise ConfigurationError("JWT_SECRET is not set")

        origins = environ.get("CORS_ORIGIN")
        cors_origins = (
            tuple(o.strip() for o in origins.split(",") if o.strip())
            if origins else DEFAULT_CORS_ORIGINS
        )

        return cls(
            mongo_uri=environ.get("MONGO_URI", "mongodb://localhost:27017"),
            database_name=environ.get("MONGO_DATABASE", "terait"),
            jwt_secret=secret,
            jwt_algorithm=environ.get("JWT_ALGORITHM", ALGORITHM),
            token_ttl=(
                parse_duration(environ["JWT_EXPIRES_IN"])
                if environ.get("JWT_EXPIRES_IN") else TOKEN_TTL
            ),
            cors_origins=cors_origins,
            bcrypt_rounds=parse_int(environ, "BCRYPT_ROUNDS", BCRYPT_ROUNDS),
            host=environ.get("HOST", "0.0.0.0"),
            port=parse_int(environ, "PORT", 3001),
            log_level=environ.get("LOG_LEVEL", "INFO"),
        )


def create_client(settings: Settings) -> MongoClient:
    # Create a new client and connect to the server
    client = MongoClient(settings.mongo_uri, server_api=ServerApi('1'))

    # Send a ping to confirm a successful connection
    try:
        client.admin.command('ping')
        log.info("Pinged your deployment. You successfully connected to MongoDB!")
    except PyMongoError as e:
        log.warning("MongoDB ping failed: %s", e)
    return client
