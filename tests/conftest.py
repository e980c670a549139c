import mongomock
import pytest
from fastapi.testclient import TestClient

from course_nest.database import Database
from course_nest.main import create_app


@pytest.fixture
def database():
    db = Database(client=mongomock.MongoClient(), db_name="course_nest_test")
    yield db
    db.close()


@pytest.fixture
def client(database):
    return TestClient(create_app(database))


@pytest.fixture
def make_course(client):
    def _make_course(**overrides):
        course = {
            "title": "Intro to UX",
            "category": "Design",
            "owner": "instructor@example.com",
            "imageUrl": "https://img.example.com/ux.png",
            "duration": "6 weeks",
            "price": 49,
            "description": "Wireframes, prototypes and user research",
            "totalModules": 8,
        }
        course.update(overrides)
        response = client.post("/courses", json=course)
        assert response.status_code == 200
        return response.json()["insertedId"]

    return _make_course
