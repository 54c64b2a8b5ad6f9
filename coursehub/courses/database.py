import math
import re
from typing import List, Optional, Tuple

from bson import ObjectId
from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from coursehub.courses.models import SORT_KEYS, CourseSort
from coursehub.database import to_object_id, utcnow

# ==================== CATEGORY CRUD ====================

async def list_categories(db: AsyncIOMotorDatabase) -> List[dict]:
    return await db.categories.find().sort("name", 1).to_list(length=None)


async def create_category(db: AsyncIOMotorDatabase, name: str) -> dict:
    category = {"name": name}
    result = await db.categories.insert_one(category)
    category["_id"] = result.inserted_id
    return category


async def delete_category(db: AsyncIOMotorDatabase, category_id: ObjectId) -> int:
    """
    Delete a category and detach it from its courses

    Returns the number of courses whose category was cleared.
    """
    result = await db.categories.delete_one({"_id": category_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Category not found")

    detached = await db.courses.update_many(
        {"category": category_id},
        {"$set": {"category": None}}
    )
    return detached.modified_count


async def resolve_category(db: AsyncIOMotorDatabase, value: str) -> Optional[ObjectId]:
    """Accept a category id or a category name (case-insensitive)"""
    category_id = to_object_id(value)
    if category_id and await db.categories.find_one({"_id": category_id}):
        return category_id

    category = await db.categories.find_one(
        {"name": {"$regex": f"^{re.escape(value)}$", "$options": "i"}}
    )
    return category["_id"] if category else None


async def populate_categories(db: AsyncIOMotorDatabase, courses: List[dict]) -> List[dict]:
    """Replace each course's category id with the {_id, name} document"""
    ids = {c.get("category") for c in courses if isinstance(c.get("category"), ObjectId)}
    lookup = {}
    if ids:
        categories = await db.categories.find({"_id": {"$in": list(ids)}}).to_list(length=None)
        lookup = {cat["_id"]: cat for cat in categories}

    for course in courses:
        if "category" in course:
            course["category"] = lookup.get(course.get("category"))
    return courses

# ==================== COURSE QUERIES ====================

async def build_course_filter(
    db: AsyncIOMotorDatabase,
    category: Optional[str] = None,
    level: Optional[str] = None,
    search: Optional[str] = None
) -> Optional[dict]:
    """
    Build the Mongo filter for the catalog

    Returns None when the filter can never match (unknown category).
    """
    query = {}

    if category:
        category_id = await resolve_category(db, category)
        if category_id is None:
            return None
        query["category"] = category_id

    if level:
        query["level"] = level

    if search:
        pattern = re.escape(search)
        query["$or"] = [
            {"title": {"$regex": pattern, "$options": "i"}},
            {"description": {"$regex": pattern, "$options": "i"}},
        ]

    return query


async def list_courses(
    db: AsyncIOMotorDatabase,
    category: Optional[str] = None,
    level: Optional[str] = None,
    search: Optional[str] = None,
    sort: CourseSort = CourseSort.NEWEST,
    page: int = 1,
    limit: int = 12
) -> dict:
    query = await build_course_filter(db, category, level, search)
    if query is None:
        return {"courses": [], "total": 0, "page": page, "pages": 0}

    cursor = (
        db.courses.find(query)
        .sort([SORT_KEYS[sort]])
        .skip((page - 1) * limit)
        .limit(limit)
    )
    courses = await cursor.to_list(length=limit)
    total = await db.courses.count_documents(query)

    return {
        "courses": await populate_categories(db, courses),
        "total": total,
        "page": page,
        "pages": math.ceil(total / limit),
    }


async def popular_courses(db: AsyncIOMotorDatabase, limit: int) -> List[dict]:
    cursor = db.courses.find().sort("enrolled_count", -1).limit(limit)
    courses = await cursor.to_list(length=limit)
    return await populate_categories(db, courses)


async def all_courses(db: AsyncIOMotorDatabase) -> List[dict]:
    courses = await db.courses.find().sort("created_at", -1).to_list(length=None)
    return await populate_categories(db, courses)


async def get_course(db: AsyncIOMotorDatabase, course_id: str) -> Optional[dict]:
    """Get course by id; None for unknown or malformed ids"""
    oid = to_object_id(course_id)
    if oid is None:
        return None
    return await db.courses.find_one({"_id": oid})


async def require_course(db: AsyncIOMotorDatabase, course_id: str) -> dict:
    course = await get_course(db, course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


def find_lesson(course: dict, lesson_id: str) -> Optional[dict]:
    for lesson in course.get("lessons") or []:
        if str(lesson.get("_id")) == lesson_id:
            return lesson
    return None

# ==================== COURSE ADMIN ====================

def build_lessons(lessons: List[dict]) -> List[dict]:
    """Give every lesson its own ObjectId, keeping ids that were sent back"""
    built = []
    for index, lesson in enumerate(lessons, start=1):
        lesson = dict(lesson)
        lesson_id = to_object_id(lesson.pop("id", None) or lesson.pop("_id", None))
        built.append({
            "_id": lesson_id or ObjectId(),
            "title": lesson.get("title"),
            "video_url": lesson.get("video_url"),
            "duration": lesson.get("duration"),
            "order": lesson.get("order") if lesson.get("order") is not None else index,
        })
    return built


async def _category_ref(db: AsyncIOMotorDatabase, value: Optional[str]) -> Optional[ObjectId]:
    if not value:
        return None
    category_id = to_object_id(value)
    if category_id is None or not await db.categories.find_one({"_id": category_id}):
        raise HTTPException(status_code=404, detail="Category not found")
    return category_id


async def create_course(db: AsyncIOMotorDatabase, data: dict) -> dict:
    course = {
        **data,
        "category": await _category_ref(db, data.get("category")),
        "lessons": build_lessons(data.get("lessons") or []),
        "reviews": [],
        "created_at": utcnow(),
    }
    result = await db.courses.insert_one(course)
    course["_id"] = result.inserted_id
    return course


async def update_course(db: AsyncIOMotorDatabase, course_id: str, updates: dict) -> dict:
    """Merge the provided fields into the course document"""
    oid = to_object_id(course_id)
    if oid is None:
        raise HTTPException(status_code=404, detail="Course not found")

    if "category" in updates:
        updates["category"] = await _category_ref(db, updates["category"])
    if "lessons" in updates:
        updates["lessons"] = build_lessons(updates["lessons"] or [])

    if not updates:
        return await require_course(db, course_id)

    course = await db.courses.find_one_and_update(
        {"_id": oid},
        {"$set": updates},
        return_document=ReturnDocument.AFTER,
    )
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


async def delete_course(db: AsyncIOMotorDatabase, course_id: str) -> None:
    oid = to_object_id(course_id)
    result = await db.courses.delete_one({"_id": oid}) if oid else None
    if not result or result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Course not found")

# ==================== REVIEWS ====================

async def add_review(
    db: AsyncIOMotorDatabase,
    course_id: ObjectId,
    user: dict,
    rating: int,
    comment: str
) -> dict:
    """Append a review; the author's name is copied, the course rating is left alone"""
    review = {
        "_id": ObjectId(),
        "user": user["_id"],
        "user_name": user.get("name"),
        "rating": rating,
        "comment": comment,
        "date": utcnow(),
    }
    await db.courses.update_one({"_id": course_id}, {"$push": {"reviews": review}})
    return review

# ==================== ENROLLMENT ====================

async def enroll_user(
    db: AsyncIOMotorDatabase,
    user_id: ObjectId,
    course_id: ObjectId,
    strict: bool = False
) -> bool:
    """
    Add a course to the user's list and bump the course counter

    Default mode increments on every call, even for a repeat enrollment.
    Strict mode only increments when the user document actually changed.
    Returns True when the counter was incremented.
    """
    if strict:
        result = await db.users.update_one(
            {"_id": user_id, "my_courses": {"$ne": course_id}},
            {"$addToSet": {"my_courses": course_id}}
        )
        if result.modified_count == 0:
            return False
    else:
        await db.users.update_one(
            {"_id": user_id},
            {"$addToSet": {"my_courses": course_id}}
        )

    await db.courses.update_one({"_id": course_id}, {"$inc": {"enrolled_count": 1}})
    return True


async def enroll_user_many(
    db: AsyncIOMotorDatabase,
    user_id: ObjectId,
    course_ids: List[ObjectId],
    strict: bool = False
) -> int:
    """Batch version of enroll_user; returns how many course counters moved"""
    if strict:
        counted = 0
        for course_id in course_ids:
            if await enroll_user(db, user_id, course_id, strict=True):
                counted += 1
        return counted

    await db.users.update_one(
        {"_id": user_id},
        {"$addToSet": {"my_courses": {"$each": course_ids}}}
    )
    result = await db.courses.update_many(
        {"_id": {"$in": course_ids}},
        {"$inc": {"enrolled_count": 1}}
    )
    return result.modified_count


def is_enrolled(user: dict, course_id: ObjectId) -> bool:
    return course_id in (user.get("my_courses") or [])


async def get_user_courses(db: AsyncIOMotorDatabase, user: dict) -> List[dict]:
    """Enrolled courses in enrollment order; deleted courses are skipped"""
    ids = user.get("my_courses") or []
    if not ids:
        return []
    courses = await db.courses.find({"_id": {"$in": ids}}).to_list(length=None)
    by_id = {c["_id"]: c for c in courses}
    ordered = [by_id[i] for i in ids if i in by_id]
    return await populate_categories(db, ordered)

# ==================== PROGRESS ====================

async def mark_lesson_complete(
    db: AsyncIOMotorDatabase,
    user_id: ObjectId,
    course_id: ObjectId,
    lesson_id: str
) -> None:
    await db.users.update_one(
        {"_id": user_id},
        {"$addToSet": {"completed_lessons": {"course": course_id, "lesson": lesson_id}}}
    )


def get_completed_lessons(user: dict, course_id: ObjectId) -> List[str]:
    return [
        entry["lesson"]
        for entry in user.get("completed_lessons") or []
        if entry.get("course") == course_id
    ]


def split_ids(values: List[str]) -> Tuple[List[ObjectId], List[str]]:
    """Parse a batch of ids, returning (valid ObjectIds, rejected raw values)"""
    valid, invalid = [], []
    for value in values:
        oid = to_object_id(value)
        if oid is None:
            invalid.append(value)
        elif oid not in valid:
            valid.append(oid)
    return valid, invalid
