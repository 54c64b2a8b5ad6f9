import logging

from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from coursehub.auth.auth_schemas import RegisterRequest, LoginRequest, AuthResponse
from coursehub.auth.auth_utils import hash_password, verify_password, create_access_token
from coursehub.auth.auth_permissions import UserContext, get_current_user
from coursehub.database import get_db, serialize_mongo, to_object_id, utcnow
from coursehub.users.user_service import public_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

INVALID_CREDENTIALS = "Invalid credentials"


@router.post("/register", response_model=AuthResponse)
async def register(data: RegisterRequest, db: AsyncIOMotorDatabase = Depends(get_db)):
    """
    Create an account and sign the caller in

    - 409 if the email is already registered
    """
    try:
        if await db.users.find_one({"email": data.email}):
            raise HTTPException(status_code=409, detail="Email already exists")

        user = {
            "name": data.name,
            "email": data.email,
            "password": hash_password(data.password),
            "is_admin": False,
            "my_courses": [],
            "completed_lessons": [],
            "created_at": utcnow(),
        }
        result = await db.users.insert_one(user)
        user["_id"] = result.inserted_id

        return {
            "message": "Registered successfully",
            "token": create_access_token(user),
            "user": public_user(user),
        }
    except HTTPException:
        raise
    except DuplicateKeyError:
        # Lost a race with a concurrent registration
        raise HTTPException(status_code=409, detail="Email already exists")
    except Exception:
        logger.exception("Register error")
        raise HTTPException(status_code=500, detail="Registration failed")


@router.post("/login", response_model=AuthResponse)
async def login(data: LoginRequest, db: AsyncIOMotorDatabase = Depends(get_db)):
    """
    Exchange email + password for a bearer token

    Unknown email and wrong password return the same 401.
    """
    try:
        user = await db.users.find_one({"email": data.email})
        if not user or not verify_password(data.password, user.get("password")):
            raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)

        return {"token": create_access_token(user), "user": public_user(user)}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Login error")
        raise HTTPException(status_code=500, detail="Login failed")


@router.get("/me")
async def me(
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(get_current_user)
):
    try:
        user_id = to_object_id(user.user_id)
        record = await db.users.find_one({"_id": user_id}, {"password": 0}) if user_id else None
        if not record:
            raise HTTPException(status_code=404, detail="User not found")
        return serialize_mongo(record)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to get user")
        raise HTTPException(status_code=500, detail="Failed to get user")
