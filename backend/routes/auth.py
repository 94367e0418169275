import logging

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool

from database import get_db
from models.user import LoginRequest, ProfileUpdate, SignupRequest
from utils.errors import InvalidCredentials, ValidationFailed
from utils.hash import dummy_verify, hash_password, verify_password
from utils.jwt import TokenManager
from utils.security import get_current_user, get_token_manager
from utils.serializers import serialize_user
from utils.users import create_user, find_by_email, update_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

# ======================
# Helpers
# ======================

def issue_user_token(tokens: TokenManager, user: dict) -> str:
    return tokens.issue({
        "sub": str(user["_id"]),
        "email": user["email"],
    })

# ======================
# Signup
# ======================

@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    data: SignupRequest,
    db=Depends(get_db),
    tokens: TokenManager = Depends(get_token_manager),
):
    try:
        digest = await run_in_threadpool(hash_password, data.password)
    except ValueError as exc:
        raise ValidationFailed(str(exc))

    user = await create_user(db, {
        "name": data.name,
        "email": data.email,
        "password": digest,
        "phone": data.phone,
    })

    logger.info("USER_SIGNUP user=%s", user["_id"])

    return {
        "success": True,
        "message": "Account created successfully",
        "token": issue_user_token(tokens, user),
        "user": serialize_user(user),
    }

# ======================
# Login
# ======================

@router.post("/login")
async def login(
    data: LoginRequest,
    db=Depends(get_db),
    tokens: TokenManager = Depends(get_token_manager),
):
    user = await find_by_email(db, data.email)

    if not user:
        await run_in_threadpool(dummy_verify)
        raise InvalidCredentials()

    valid = await run_in_threadpool(verify_password, data.password, user.get("password"))
    if not valid:
        raise InvalidCredentials()

    return {
        "success": True,
        "message": "Login successful",
        "token": issue_user_token(tokens, user),
        "user": serialize_user(user),
    }

# ======================
# Current User
# ======================

@router.get("/me")
async def me(user=Depends(get_current_user)):
    return {
        "success": True,
        "message": "Current user",
        "user": serialize_user(user),
    }


@router.put("/profile")
async def edit_profile(
    data: ProfileUpdate,
    user=Depends(get_current_user),
    db=Depends(get_db),
):
    updated = await update_profile(db, user["_id"], data.model_dump(exclude_unset=True))

    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": serialize_user(updated),
    }
