import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from models.Account import AuthResponse, LoginRequest, RegisterRequest
from services.config import DEFAULT_ROLE, USERS
from services.database import ResourceAccessor, get_store
from services.errors import BadRequest, Conflict, Unauthorized
from services.gate import require_user
from services.passwords import PasswordHasher, get_passwords
from services.tokens import TokenService, get_tokens

log = logging.getLogger(__name__)

router = APIRouter()


def user_info(user_id: str, user: dict) -> dict:
    return {
        "id": user_id,
        "email": user["email"],
        "name": user.get("name"),
        "role": user.get("role", DEFAULT_ROLE),
    }


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
def register(
    req: RegisterRequest,
    store: ResourceAccessor = Depends(get_store),
    tokens: TokenService = Depends(get_tokens),
    passwords: PasswordHasher = Depends(get_passwords),
):
    if not req.email or not req.password or not req.name:
        raise BadRequest("Email, password and name are required")

    # Two concurrent registrations can both pass this check; nothing guards it.
    if store.read_filtered(USERS, "email", req.email):
        raise Conflict("User already exists")

    user = {
        "email": req.email,
        "password": passwords.hash(req.password),
        "name": req.name,
        "role": req.role or DEFAULT_ROLE,
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }
    user_id = store.push(USERS, user)
    log.info("Registered user %s", req.email)

    token = tokens.issue(user_id, user["email"], user["role"])
    return {"success": True, "token": token, "user": user_info(user_id, user)}


@router.post("/login", response_model=AuthResponse)
def login(
    req: LoginRequest,
    store: ResourceAccessor = Depends(get_store),
    tokens: TokenService = Depends(get_tokens),
    passwords: PasswordHasher = Depends(get_passwords),
):
    if not req.email or not req.password:
        raise BadRequest("Email and password are required")

    matches = store.read_filtered(USERS, "email", req.email)
    if not matches:
        raise Unauthorized("Invalid credentials")

    user_id, user = next(iter(matches.items()))
    if not passwords.verify(req.password, user.get("password")):
        raise Unauthorized("Invalid credentials")

    log.info("User %s logged in", req.email)
    token = tokens.issue(user_id, user["email"], user.get("role", DEFAULT_ROLE))
    return {"success": True, "token": token, "user": user_info(user_id, user)}


@router.get("/me")
async def read_me(current_user: dict = Depends(require_user)):
    return {"message": "You are authenticated!", "user": current_user}
