from typing import Optional
from pydantic import BaseModel, Field


class CertificateCreate(BaseModel):
    course_title: str = Field(..., min_length=1)
    student_name: str = Field(..., min_length=1)
    date: Optional[str] = Field(None, description="Completion date, defaults to today (YYYY-MM-DD)")
