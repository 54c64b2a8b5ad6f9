import logging

from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from coursehub.auth.auth_permissions import UserContext, get_current_user
from coursehub.database import get_db
from coursehub.users.user_schemas import ProfileUpdate, PasswordChange
from coursehub.users import user_service as service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["User Profile"])


@router.put("/profile")
async def update_profile(
    data: ProfileUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(get_current_user)
):
    """
    Update name and/or email

    - 409 if the new email belongs to another account
    """
    try:
        updates = data.model_dump(exclude_none=True)
        return await service.update_profile(db, user, updates)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Profile update failed")
        raise HTTPException(status_code=500, detail="Failed to update profile")


@router.put("/password")
async def change_password(
    data: PasswordChange,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(get_current_user)
):
    """Replace the password after re-checking the current one"""
    try:
        await service.change_password(db, user, data.current_password, data.new_password)
        return {"message": "Password updated"}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Password update failed")
        raise HTTPException(status_code=500, detail="Failed to update password")
