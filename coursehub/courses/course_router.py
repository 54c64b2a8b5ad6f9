import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from coursehub.config import DEFAULT_PAGE_SIZE, MAX_PAGE_NUMBER, MAX_PAGE_SIZE, POPULAR_COURSES_LIMIT
from coursehub.courses import database as course_db
from coursehub.courses.dependencies import get_current_user_record, verify_enrollment
from coursehub.courses.models import CourseLevel, CourseSort, ReviewCreate
from coursehub.database import get_db, serialize_mongo, serialize_many

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Course Catalog"])

# ==================== CATEGORIES ====================

@router.get("/categories")
async def get_categories(db: AsyncIOMotorDatabase = Depends(get_db)):
    try:
        return serialize_many(await course_db.list_categories(db))
    except Exception:
        logger.exception("Categories fetch error")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")

# ==================== CATALOG ====================

@router.get("/courses")
async def list_courses(
    category: Optional[str] = Query(None, description="Category id or name"),
    level: Optional[CourseLevel] = None,
    search: Optional[str] = Query(None, description="Matches title or description"),
    sort: CourseSort = CourseSort.NEWEST,
    page: int = Query(1, ge=1, le=MAX_PAGE_NUMBER),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """
    Browse the catalog

    Returns {courses, total, page, pages}; each course has its category joined.
    """
    try:
        result = await course_db.list_courses(
            db,
            category=category,
            level=level.value if level else None,
            search=search,
            sort=sort,
            page=page,
            limit=limit,
        )
        return serialize_mongo(result)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Courses fetch error")
        raise HTTPException(status_code=500, detail="Failed to fetch courses")


@router.get("/courses/popular")
async def get_popular_courses(db: AsyncIOMotorDatabase = Depends(get_db)):
    try:
        return serialize_many(await course_db.popular_courses(db, POPULAR_COURSES_LIMIT))
    except Exception:
        logger.exception("Popular courses fetch error")
        raise HTTPException(status_code=500, detail="Failed to fetch popular courses")


@router.get("/courses/{course_id}")
async def get_course(course_id: str, db: AsyncIOMotorDatabase = Depends(get_db)):
    try:
        course = await course_db.require_course(db, course_id)
        populated = await course_db.populate_categories(db, [course])
        return serialize_mongo(populated[0])
    except HTTPException:
        raise
    except Exception:
        logger.exception("Course fetch error")
        raise HTTPException(status_code=500, detail="Failed to fetch course")

# ==================== LESSONS (ENROLLED ONLY) ====================

@router.get("/courses/{course_id}/lessons")
async def get_course_lessons(course: dict = Depends(verify_enrollment)):
    return serialize_many(course.get("lessons") or [])


@router.get("/courses/{course_id}/lessons/{lesson_id}")
async def get_lesson(lesson_id: str, course: dict = Depends(verify_enrollment)):
    """Single lesson plus its siblings for prev/next navigation"""
    lesson = course_db.find_lesson(course, lesson_id)
    if not lesson:
        raise HTTPException(status_code=404, detail="Lesson not found")

    return serialize_mongo({
        "lesson": lesson,
        "course": {"_id": course["_id"], "title": course.get("title")},
        "lessons": course.get("lessons") or [],
    })

# ==================== REVIEWS ====================

@router.post("/courses/{course_id}/reviews")
async def add_review(
    course_id: str,
    data: ReviewCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    user: dict = Depends(get_current_user_record)
):
    try:
        course = await course_db.require_course(db, course_id)
        review = await course_db.add_review(db, course["_id"], user, data.rating, data.comment)
        return {"message": "Review added", "review": serialize_mongo(review)}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Review error")
        raise HTTPException(status_code=500, detail="Failed to add review")
