# course_nest/exceptions.py
from typing import Optional

from fastapi import status


class CourseNestError(Exception):
    """Base error; carries the HTTP status and the message sent to the client"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(CourseNestError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(CourseNestError):
    # duplicate enrollments have always been reported as 400
    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenError(CourseNestError):
    status_code = status.HTTP_403_FORBIDDEN
