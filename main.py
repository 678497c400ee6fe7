import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.database import Database

from routes.Account import router as account_router
from routes.Attendance import router as attendance_router
from routes.Employees import router as employees_router
from routes.Records import router as records_router
from config.configrations import CORS_METHODS, Settings, create_client
from config.logger import setup_logging
from services.database import ResourceAccessor
from services.errors import register_error_handlers
from services.passwords import PasswordHasher
from services.tokens import TokenService

log = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    # The app only closes a client it created itself.
    client = None
    if database is None:
        client = create_client(settings)
        database = client[settings.database_name]

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("Serving database %s, CORS origins %s", database.name, list(settings.cors_origins))
        yield
        if client is not None:
            client.close()

    app = FastAPI(title="Terait API", lifespan=lifespan)

    app.state.settings = settings
    app.state.store = ResourceAccessor(database)
    app.state.tokens = TokenService(settings.jwt_secret, settings.token_ttl, settings.jwt_algorithm)
    app.state.passwords = PasswordHasher(settings.bcrypt_rounds)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(account_router, prefix="/api", tags=["Account"])
    app.include_router(records_router, prefix="/api", tags=["Records"])
    app.include_router(employees_router, prefix="/api/employees", tags=["Employees"])
    app.include_router(attendance_router, prefix="/api/attendance", tags=["Attendance"])

    @app.get("/api/health")
    async def health():
        return {"status": "live", "message": "Terait API is running"}

    return app


if __name__ == "__main__":
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
