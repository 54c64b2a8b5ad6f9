"""
Enrollment and progress endpoints

Enrollment is a reference list on the user plus a counter on the course.
The two writes are not wrapped in a transaction.
"""

import logging

from fastapi import APIRouter, HTTPException, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from coursehub import config
from coursehub.courses import database as course_db
from coursehub.courses.dependencies import get_current_user_record
from coursehub.courses.models import EnrollmentCreate, MultiEnrollmentCreate, LessonComplete
from coursehub.database import get_db, serialize_many, to_object_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Enrollments"])

# ==================== ENROLLMENT ENDPOINTS ====================

@router.post("/enroll")
async def enroll_endpoint(
    enrollment: EnrollmentCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: dict = Depends(get_current_user_record)
):
    """
    Enroll in a course

    Repeat enrollments keep a single entry on the user. Unless
    STRICT_ENROLLMENT_COUNT is set the course counter still increments.
    """
    try:
        course = await course_db.require_course(db, enrollment.course_id)
        counted = await course_db.enroll_user(
            db, user["_id"], course["_id"], strict=config.STRICT_ENROLLMENT_COUNT
        )
        return {"message": "Enrolled successfully", "counted": counted}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Enrollment error")
        raise HTTPException(status_code=500, detail="Enrollment failed")


@router.post("/enroll/multiple")
async def enroll_multiple(
    enrollment: MultiEnrollmentCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: dict = Depends(get_current_user_record)
):
    """Enroll in every course of a checkout batch"""
    try:
        course_ids, invalid = course_db.split_ids(enrollment.course_ids)
        found = await db.courses.count_documents({"_id": {"$in": course_ids}}) if course_ids else 0
        if invalid or found != len(course_ids):
            raise HTTPException(status_code=404, detail="One or more courses not found")

        counted = await course_db.enroll_user_many(
            db, user["_id"], course_ids, strict=config.STRICT_ENROLLMENT_COUNT
        )
        return {"message": "Enrolled successfully", "counted": counted}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Batch enrollment error")
        raise HTTPException(status_code=500, detail="Enrollment failed")


@router.get("/enroll/check/{course_id}")
async def check_enrollment(course_id: str, user: dict = Depends(get_current_user_record)):
    oid = to_object_id(course_id)
    return {"enrolled": bool(oid) and course_db.is_enrolled(user, oid)}


@router.get("/user/courses")
async def get_my_courses(
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: dict = Depends(get_current_user_record)
):
    """All enrolled courses for the caller"""
    try:
        return serialize_many(await course_db.get_user_courses(db, user))
    except Exception:
        logger.exception("My courses fetch error")
        raise HTTPException(status_code=500, detail="Failed to fetch courses")

# ==================== PROGRESS ====================

@router.post("/progress/complete")
async def complete_lesson(
    body: LessonComplete,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: dict = Depends(get_current_user_record)
):
    try:
        course = await course_db.require_course(db, body.course_id)
        await course_db.mark_lesson_complete(db, user["_id"], course["_id"], body.lesson_id)
        return {"message": "Lesson marked as complete"}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Progress update error")
        raise HTTPException(status_code=500, detail="Failed to update progress")


@router.get("/progress/{course_id}")
async def get_progress(course_id: str, user: dict = Depends(get_current_user_record)):
    oid = to_object_id(course_id)
    completed = course_db.get_completed_lessons(user, oid) if oid else []
    return {"completed_lessons": completed}
