# course_nest/data_service.py
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pymongo import results

from course_nest.database import (
    COURSES, ENROLLMENTS, PROGRESS, REVIEWS, Database, serialize_document, to_object_id,
)
from course_nest.models import DeleteResult, InsertResult, UpdateResult


def _inserted(result: results.InsertOneResult) -> InsertResult:
    return InsertResult(acknowledged=result.acknowledged, insertedId=str(result.inserted_id))


def _updated(result: results.UpdateResult) -> UpdateResult:
    upserted_id = result.upserted_id
    return UpdateResult(
        acknowledged=result.acknowledged,
        matchedCount=result.matched_count,
        modifiedCount=result.modified_count,
        upsertedCount=1 if upserted_id is not None else 0,
        upsertedId=str(upserted_id) if upserted_id is not None else None,
    )


def _deleted(result: results.DeleteResult) -> DeleteResult:
    return DeleteResult(acknowledged=result.acknowledged, deletedCount=result.deleted_count)


class CourseDataService:
    def __init__(self, database: Database):
        self.courses = database.collection(COURSES)

    def get_all_courses(self, category: Optional[str] = None, owner: Optional[str] = None) -> List[dict]:
        query: Dict[str, Any] = {}
        if category:
            # anchored so "des" does not match "Design"
            query["category"] = re.compile(f"^{re.escape(category)}$", re.IGNORECASE)
        if owner:
            query["owner"] = owner
        return [serialize_document(c) for c in self.courses.find(query)]

    def get_course_by_id(self, course_id: str) -> Optional[dict]:
        return serialize_document(self.courses.find_one({"_id": to_object_id(course_id)}))

    def add_course(self, course_data: dict) -> InsertResult:
        # insert_one stamps _id onto the dict it is given
        return _inserted(self.courses.insert_one(dict(course_data)))

    def update_course(self, course_id: str, update_data: dict) -> UpdateResult:
        return _updated(self.courses.update_one({"_id": to_object_id(course_id)}, {"$set": update_data}))

    def delete_course(self, course_id: str) -> DeleteResult:
        return _deleted(self.courses.delete_one({"_id": to_object_id(course_id)}))


class EnrollmentDataService:
    def __init__(self, database: Database):
        self.enrollments = database.collection(ENROLLMENTS)

    def find_enrollment(self, course_id: Optional[str], student_email: Optional[str]) -> Optional[dict]:
        return serialize_document(
            self.enrollments.find_one({"courseId": course_id, "studentEmail": student_email})
        )

    def get_all_enrollments(self, student_email: Optional[str] = None) -> List[dict]:
        query = {"studentEmail": student_email} if student_email else {}
        return [serialize_document(e) for e in self.enrollments.find(query)]

    def add_enrollment(self, enrollment: dict) -> InsertResult:
        return _inserted(self.enrollments.insert_one(dict(enrollment)))

    def delete_enrollment(self, enrollment_id: str) -> DeleteResult:
        return _deleted(self.enrollments.delete_one({"_id": to_object_id(enrollment_id)}))


class ProgressDataService:
    def __init__(self, database: Database):
        self.progress = database.collection(PROGRESS)

    def init_progress(self, student_email: Optional[str], course_id: Optional[str], course: dict) -> UpdateResult:
        """Create the progress record for (student, course) unless one already exists"""
        result = self.progress.update_one(
            {"studentEmail": student_email, "courseId": course_id},
            {
                "$setOnInsert": {
                    "studentEmail": student_email,
                    "courseId": course_id,
                    "courseTitle": course.get("title"),
                    "completedModules": 0,
                    "totalModules": course.get("totalModules") or 0,
                    "scores": [],
                    "lastActive": datetime.now(timezone.utc),
                }
            },
            upsert=True,
        )
        return _updated(result)


class ReviewDataService:
    def __init__(self, database: Database):
        self.reviews = database.collection(REVIEWS)

    def add_review(self, review: dict) -> InsertResult:
        return _inserted(self.reviews.insert_one(dict(review)))

    def get_reviews_by_course(self, course_id: str) -> List[dict]:
        return [serialize_document(r) for r in self.reviews.find({"courseId": course_id})]

    def get_average_rating(self, course_id: str) -> Union[int, float]:
        pipeline = [
            {"$match": {"courseId": course_id}},
            {"$group": {"_id": None, "average": {"$avg": "$rating"}}},
        ]
        groups = list(self.reviews.aggregate(pipeline))
        if not groups:
            return 0
        average = groups[0].get("average") or 0
        # whole means go out as ints, 4 rather than 4.0
        if isinstance(average, float) and average.is_integer():
            return int(average)
        return average

    def get_review_by_id(self, review_id: str) -> Optional[dict]:
        return serialize_document(self.reviews.find_one({"_id": to_object_id(review_id)}))

    def update_review(self, review_id: str, update_data: dict) -> UpdateResult:
        return _updated(self.reviews.update_one({"_id": to_object_id(review_id)}, {"$set": update_data}))

    def delete_review(self, review_id: str) -> DeleteResult:
        return _deleted(self.reviews.delete_one({"_id": to_object_id(review_id)}))
