# course_nest/models.py
from pydantic import BaseModel, ConfigDict
from typing import Any, Optional, Union


class InsertResult(BaseModel):
    acknowledged: bool
    insertedId: str


class UpdateResult(BaseModel):
    acknowledged: bool
    matchedCount: int
    modifiedCount: int
    upsertedCount: int
    upsertedId: Optional[str] = None


class DeleteResult(BaseModel):
    acknowledged: bool
    deletedCount: int


class EnrollmentCreate(BaseModel):
    # any other caller-supplied fields are stored on the enrollment as-is
    model_config = ConfigDict(extra="allow")

    courseId: Optional[Any] = None
    studentEmail: Optional[Any] = None


class ReviewCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    courseId: Optional[Any] = None
    studentEmail: Optional[Any] = None
    rating: Optional[Any] = None
    comment: Optional[Any] = None


class ReviewUpdate(BaseModel):
    rating: Optional[Any] = None
    comment: Optional[Any] = None
    studentEmail: Optional[Any] = None


class ReviewDelete(BaseModel):
    studentEmail: Optional[Any] = None
    # checked for truthiness, not validated as a bool
    isAdmin: Optional[Any] = False


class AverageRating(BaseModel):
    average: Union[int, float]
