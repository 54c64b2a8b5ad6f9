from fastapi import Depends, HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase

from coursehub.auth.auth_permissions import UserContext, get_current_user
from coursehub.courses import database as course_db
from coursehub.database import get_db
from coursehub.users.user_service import get_user_record


async def get_current_user_record(
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: UserContext = Depends(get_current_user)
) -> dict:
    """Full user document of the authenticated caller"""
    return await get_user_record(db, user)


async def verify_enrollment(
    course_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: dict = Depends(get_current_user_record)
) -> dict:
    """
    Load the course and verify the caller is enrolled in it

    Raises:
        404: Course not found
        403: Not enrolled
    """
    course = await course_db.require_course(db, course_id)
    if not course_db.is_enrolled(user, course["_id"]):
        raise HTTPException(status_code=403, detail="Not enrolled in this course")
    return course
