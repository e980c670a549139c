# course_nest/service.py
import functools
import logging
from datetime import datetime, timezone
from typing import List, Optional

from bson.errors import InvalidId

from course_nest.data_service import (
    CourseDataService, EnrollmentDataService, ProgressDataService, ReviewDataService,
)
from course_nest.database import Database
from course_nest.exceptions import ConflictError, CourseNestError, ForbiddenError, NotFoundError
from course_nest.models import DeleteResult, InsertResult, UpdateResult

logger = logging.getLogger("course_nest.service")


def fails_with(message: str, log: bool = False):
    """Report any unexpected failure of the wrapped operation as a CourseNestError"""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except CourseNestError:
                raise
            except Exception as e:
                if log:
                    logger.exception(f"{func.__qualname__} failed: {str(e)}")
                else:
                    logger.warning(f"{func.__qualname__} failed: {str(e)}")
                raise CourseNestError(message) from e
        return wrapper
    return decorator


class CourseService:
    def __init__(self, database: Database):
        self.data_service = CourseDataService(database)

    @fails_with("Failed to fetch courses")
    def get_all(self, category: Optional[str] = None, owner: Optional[str] = None) -> List[dict]:
        return self.data_service.get_all_courses(category=category, owner=owner)

    @fails_with("Failed to fetch course details")
    def get_by_id(self, course_id: str) -> Optional[dict]:
        return self.data_service.get_course_by_id(course_id)

    @fails_with("Failed to add course")
    def create(self, course_data: dict) -> InsertResult:
        return self.data_service.add_course(course_data)

    @fails_with("Failed to update course", log=True)
    def update(self, course_id: str, course_data: dict) -> UpdateResult:
        return self.data_service.update_course(course_id, course_data)

    @fails_with("Failed to delete course")
    def delete(self, course_id: str) -> DeleteResult:
        return self.data_service.delete_course(course_id)


class EnrollmentService:
    """Enrollment ledger; seeds a progress record on every first enrollment"""

    def __init__(self, database: Database):
        self.data_service = EnrollmentDataService(database)
        self.courses = CourseDataService(database)
        self.progress = ProgressDataService(database)

    @fails_with("Failed to enroll", log=True)
    def enroll(self, enrollment: dict) -> InsertResult:
        """
        Enroll a student in a course.

        The duplicate check and the insert are separate round trips, so two
        concurrent requests for the same pair can both get through. Progress is
        upserted with $setOnInsert and stays single either way. A failure after
        the enrollment insert leaves the enrollment without progress; nothing is
        rolled back.
        """
        course_id = enrollment.get("courseId")
        student_email = enrollment.get("studentEmail")

        if self.data_service.find_enrollment(course_id, student_email):
            raise ConflictError("Already enrolled in this course")

        try:
            course = self.courses.get_course_by_id(course_id)
        except InvalidId:
            course = None
        if not course:
            raise NotFoundError("Course not found")

        # point-in-time copy; later course edits do not reach the enrollment
        enriched_enrollment = {
            **enrollment,
            "courseTitle": course.get("title"),
            "courseImage": course.get("imageUrl"),
            "courseCategory": course.get("category"),
            "courseDuration": course.get("duration"),
            "coursePrice": course.get("price"),
            "description": course.get("description"),
        }

        result = self.data_service.add_enrollment(enriched_enrollment)
        self.progress.init_progress(student_email, course_id, course)
        logger.info(f"Enrolled {student_email} in course {course_id}")
        return result

    @fails_with("Failed to fetch enrollments")
    def get_all(self, student_email: Optional[str] = None) -> List[dict]:
        return self.data_service.get_all_enrollments(student_email)

    @fails_with("Failed to unenroll")
    def unenroll(self, enrollment_id: str) -> DeleteResult:
        return self.data_service.delete_enrollment(enrollment_id)


class ReviewService:
    def __init__(self, database: Database):
        self.data_service = ReviewDataService(database)

    @fails_with("Failed to add review")
    def create(self, review: dict) -> InsertResult:
        return self.data_service.add_review({**review, "createdAt": datetime.now(timezone.utc)})

    @fails_with("Failed to fetch reviews")
    def get_by_course(self, course_id: str) -> List[dict]:
        return self.data_service.get_reviews_by_course(course_id)

    @fails_with("Failed to calculate average rating")
    def average_rating(self, course_id: str):
        return self.data_service.get_average_rating(course_id)

    def _get_existing(self, review_id: str) -> dict:
        try:
            review = self.data_service.get_review_by_id(review_id)
        except InvalidId:
            review = None
        if not review:
            raise NotFoundError("Review not found")
        return review

    @fails_with("Failed to update review")
    def update(self, review_id: str, rating, comment, requester_email) -> UpdateResult:
        """Only the author may edit; there is no admin override for edits"""
        review = self._get_existing(review_id)
        if review.get("studentEmail") != requester_email:
            raise ForbiddenError("Not authorized to edit this review")
        return self.data_service.update_review(
            review_id,
            {"rating": rating, "comment": comment, "updatedAt": datetime.now(timezone.utc)},
        )

    @fails_with("Failed to delete review")
    def delete(self, review_id: str, requester_email, is_admin=False) -> DeleteResult:
        review = self._get_existing(review_id)
        if review.get("studentEmail") != requester_email and not bool(is_admin):
            raise ForbiddenError("Not authorized to delete this review")
        return self.data_service.delete_review(review_id)
