from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional
from enum import Enum

# ==================== ENUMS ====================

class CourseLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"

class CourseSort(str, Enum):
    NEWEST = "newest"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    POPULAR = "popular"
    RATING = "rating"

# Exactly one sort key per option, no tie-break
SORT_KEYS = {
    CourseSort.NEWEST: ("created_at", -1),
    CourseSort.PRICE_LOW: ("price", 1),
    CourseSort.PRICE_HIGH: ("price", -1),
    CourseSort.POPULAR: ("enrolled_count", -1),
    CourseSort.RATING: ("rating", -1),
}

# ==================== CATEGORY MODELS ====================

class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=80)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Category name must not be blank")
        return v

# ==================== COURSE MODELS ====================

class LessonIn(BaseModel):
    id: Optional[str] = Field(None, alias="_id")
    title: str
    video_url: Optional[str] = None
    duration: Optional[str] = None
    order: Optional[int] = None

class InstructorIn(BaseModel):
    name: str = "CourseHub Instructor"
    avatar: Optional[str] = None
    bio: Optional[str] = None

class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    short_description: Optional[str] = None
    price: float = Field(0, ge=0)
    thumbnail: Optional[str] = None
    category: Optional[str] = None
    instructor: InstructorIn = Field(default_factory=InstructorIn)
    level: CourseLevel = CourseLevel.BEGINNER
    duration: Optional[str] = None
    lessons: List[LessonIn] = []
    rating: float = Field(4.5, ge=0, le=5)
    enrolled_count: int = Field(0, ge=0)

NON_NULLABLE_COURSE_FIELDS = ("title", "price", "instructor", "level", "lessons", "rating")

class CourseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    short_description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    thumbnail: Optional[str] = None
    category: Optional[str] = None
    instructor: Optional[InstructorIn] = None
    level: Optional[CourseLevel] = None
    duration: Optional[str] = None
    lessons: Optional[List[LessonIn]] = None
    rating: Optional[float] = Field(None, ge=0, le=5)

    @model_validator(mode="after")
    def reject_nulls(self):
        """Fields a course cannot live without may be omitted, not nulled"""
        nulled = [
            name for name in NON_NULLABLE_COURSE_FIELDS
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
        return self

# ==================== REVIEW MODELS ====================

class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""

# ==================== ENROLLMENT MODELS ====================

class EnrollmentCreate(BaseModel):
    course_id: str

class MultiEnrollmentCreate(BaseModel):
    course_ids: List[str] = Field(..., min_length=1)

class LessonComplete(BaseModel):
    course_id: str
    lesson_id: str
