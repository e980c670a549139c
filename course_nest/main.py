# course_nest/main.py
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from course_nest import __version__
from course_nest.config import Settings, get_settings
from course_nest.database import Database
from course_nest.exceptions import CourseNestError
from course_nest.middleware import LoggingMiddleware
from course_nest.models import (
    AverageRating, DeleteResult, EnrollmentCreate, InsertResult, ReviewCreate, ReviewDelete,
    ReviewUpdate, UpdateResult,
)
from course_nest.service import CourseService, EnrollmentService, ReviewService

logger = logging.getLogger("course_nest")


def create_app(database: Optional[Database] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the API around one shared database handle"""
    settings = settings or get_settings()
    logger.setLevel(settings.log_level)
    if database is None:
        database = Database(settings.mongodb_uri, db_name=settings.db_name)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.connect()
        yield
        database.close()

    app = FastAPI(title="Course Nest", version=__version__, lifespan=lifespan)
    app.state.database = database

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    course_service = CourseService(database)
    enrollment_service = EnrollmentService(database)
    review_service = ReviewService(database)

    @app.get("/", response_class=PlainTextResponse)
    def read_root():
        return "Course-Nest Server Is Running"

    # Courses
    @app.get("/courses")
    def get_all_courses(category: Optional[str] = None, owner: Optional[str] = None) -> List[Dict[str, Any]]:
        """List courses, optionally filtered by category (case-insensitive) and owner"""
        return course_service.get_all(category=category, owner=owner)

    @app.get("/courses/{course_id}")
    def get_course(course_id: str) -> Optional[Dict[str, Any]]:
        """Get a course by ID; an unknown ID gives a null body"""
        return course_service.get_by_id(course_id)

    @app.post("/courses", response_model=InsertResult)
    def create_course(course: Dict[str, Any] = Body(...)):
        """Create a course from whatever fields the client sends"""
        return course_service.create(course)

    @app.patch("/courses/{course_id}", response_model=UpdateResult)
    def update_course(course_id: str, course: Dict[str, Any] = Body(...)):
        """Update only the supplied fields of a course"""
        return course_service.update(course_id, course)

    @app.delete("/courses/{course_id}", response_model=DeleteResult)
    def delete_course(course_id: str):
        return course_service.delete(course_id)

    @app.get("/courses/{course_id}/average-rating", response_model=AverageRating)
    def get_average_rating(course_id: str):
        """Mean review rating for a course, 0 when it has no reviews"""
        return AverageRating(average=review_service.average_rating(course_id))

    # Enrollments
    @app.post("/enrollments", response_model=InsertResult)
    def create_enrollment(enrollment: EnrollmentCreate):
        """Enroll a student and seed their progress record"""
        return enrollment_service.enroll(enrollment.model_dump(exclude_unset=True))

    @app.get("/enrollments")
    def get_enrollments(studentEmail: Optional[str] = None) -> List[Dict[str, Any]]:
        return enrollment_service.get_all(studentEmail)

    @app.delete("/enrollments/{enrollment_id}", response_model=DeleteResult)
    def delete_enrollment(enrollment_id: str):
        return enrollment_service.unenroll(enrollment_id)

    # Reviews
    @app.post("/reviews", response_model=InsertResult)
    def create_review(review: ReviewCreate):
        return review_service.create(review.model_dump(exclude_unset=True))

    @app.get("/reviews/{course_id}")
    def get_reviews(course_id: str) -> List[Dict[str, Any]]:
        return review_service.get_by_course(course_id)

    @app.patch("/reviews/{review_id}", response_model=UpdateResult)
    def update_review(review_id: str, review: ReviewUpdate):
        """Edit a review; only its author may do so"""
        return review_service.update(review_id, review.rating, review.comment, review.studentEmail)

    @app.delete("/reviews/{review_id}", response_model=DeleteResult)
    def delete_review(review_id: str, requester: Optional[ReviewDelete] = None):
        """Delete a review as its author, or as an admin"""
        requester = requester or ReviewDelete()
        return review_service.delete(review_id, requester.studentEmail, requester.isAdmin)

    @app.exception_handler(CourseNestError)
    async def course_nest_exception_handler(request: Request, exc: CourseNestError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "message": "Invalid request body",
                "detail": [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()],
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {str(exc)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )

    return app


def run():
    import uvicorn

    settings = get_settings()
    logger.info(f"Course-Nest server is running on port: {settings.port}")
    uvicorn.run(
        "course_nest.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
