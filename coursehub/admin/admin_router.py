"""
Admin panel: category and course management

Every route sits behind the admin gate and writes an audit entry on mutation.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from coursehub.admin.audit import log_audit, get_audit_trail
from coursehub.auth.auth_permissions import UserContext, require_admin
from coursehub.courses import database as course_db
from coursehub.courses.models import CategoryCreate, CourseCreate, CourseUpdate
from coursehub.database import get_db, serialize_mongo, serialize_many, to_object_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])

# ==================== CATEGORIES ====================

@router.get("/categories")
async def admin_list_categories(
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: UserContext = Depends(require_admin)
):
    try:
        return serialize_many(await course_db.list_categories(db))
    except Exception:
        logger.exception("Admin categories fetch error")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")


@router.post("/categories")
async def admin_create_category(
    data: CategoryCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: UserContext = Depends(require_admin)
):
    try:
        category = await course_db.create_category(db, data.name)
        await log_audit(db, admin, "create_category", "category", category["_id"], {"name": data.name})
        return serialize_mongo(category)
    except Exception:
        logger.exception("Category create error")
        raise HTTPException(status_code=500, detail="Failed to create category")


@router.delete("/categories/{category_id}")
async def admin_delete_category(
    category_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: UserContext = Depends(require_admin)
):
    """
    Delete a category

    Courses that pointed at it keep existing with category = null.
    """
    try:
        oid = to_object_id(category_id)
        if oid is None:
            raise HTTPException(status_code=404, detail="Category not found")

        detached = await course_db.delete_category(db, oid)
        await log_audit(db, admin, "delete_category", "category", category_id, {"courses_detached": detached})
        return {"message": "Deleted", "courses_detached": detached}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Category delete error")
        raise HTTPException(status_code=500, detail="Failed to delete")

# ==================== COURSES ====================

@router.get("/courses")
async def admin_list_courses(
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: UserContext = Depends(require_admin)
):
    try:
        return serialize_many(await course_db.all_courses(db))
    except Exception:
        logger.exception("Admin courses fetch error")
        raise HTTPException(status_code=500, detail="Failed to fetch courses")


@router.post("/courses")
async def admin_create_course(
    data: CourseCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: UserContext = Depends(require_admin)
):
    try:
        course = await course_db.create_course(db, data.model_dump(mode="json"))
        await log_audit(db, admin, "create_course", "course", course["_id"], {"title": course.get("title")})
        return serialize_mongo(course)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Course create error")
        raise HTTPException(status_code=500, detail="Failed to create course")


@router.put("/courses/{course_id}")
async def admin_update_course(
    course_id: str,
    data: CourseUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: UserContext = Depends(require_admin)
):
    """Merge the fields present in the body into the course"""
    try:
        updates = data.model_dump(mode="json", exclude_unset=True)
        course = await course_db.update_course(db, course_id, updates)
        await log_audit(db, admin, "update_course", "course", course_id, {"fields": sorted(updates)})
        return serialize_mongo(course)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Course update error")
        raise HTTPException(status_code=500, detail="Failed to update course")


@router.delete("/courses/{course_id}")
async def admin_delete_course(
    course_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: UserContext = Depends(require_admin)
):
    try:
        await course_db.delete_course(db, course_id)
        await log_audit(db, admin, "delete_course", "course", course_id)
        return {"message": "Deleted"}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Course delete error")
        raise HTTPException(status_code=500, detail="Failed to delete")

# ==================== AUDIT ====================

@router.get("/audit")
async def admin_audit_trail(
    target_type: Optional[str] = None,
    target_id: Optional[str] = None,
    limit: int = Query(100, ge=1, le=500),
    db: AsyncIOMotorDatabase = Depends(get_db),
    admin: UserContext = Depends(require_admin)
):
    try:
        logs = await get_audit_trail(db, target_type, target_id, limit)
        return {"logs": logs, "count": len(logs)}
    except Exception:
        logger.exception("Audit fetch error")
        raise HTTPException(status_code=500, detail="Failed to fetch audit trail")
