"""API tests for the course directory."""

import logging

from bson import ObjectId


class TestRoot:
    def test_liveness_text(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.text == "Course-Nest Server Is Running"


class TestCreateAndFetch:
    def test_insert_result_shape(self, client):
        response = client.post("/courses", json={"title": "Python"})
        body = response.json()
        assert response.status_code == 200
        assert body["acknowledged"] is True
        assert ObjectId.is_valid(body["insertedId"])

    def test_fetched_id_round_trips(self, client, make_course):
        course_id = make_course(title="Data Science")
        course = client.get(f"/courses/{course_id}").json()
        assert course["_id"] == course_id
        assert course["title"] == "Data Science"

    def test_body_is_persisted_verbatim(self, client, make_course):
        course_id = make_course(level="beginner", tags=["ux", "figma"])
        course = client.get(f"/courses/{course_id}").json()
        assert course["level"] == "beginner"
        assert course["tags"] == ["ux", "figma"]

    def test_unknown_id_returns_null(self, client):
        response = client.get(f"/courses/{ObjectId()}")
        assert response.status_code == 200
        assert response.json() is None

    def test_malformed_id_is_a_fetch_failure(self, client):
        response = client.get("/courses/not-an-id")
        assert response.status_code == 500
        assert response.json() == {"message": "Failed to fetch course details"}


class TestListCourses:
    def test_lists_everything_without_filters(self, client, make_course):
        make_course(title="A")
        make_course(title="B", category="Marketing")
        courses = client.get("/courses").json()
        assert {c["title"] for c in courses} == {"A", "B"}
        assert all(isinstance(c["_id"], str) for c in courses)

    def test_category_is_case_insensitive(self, client, make_course):
        make_course(category="Design")
        assert len(client.get("/courses", params={"category": "design"}).json()) == 1
        assert len(client.get("/courses", params={"category": "DESIGN"}).json()) == 1

    def test_category_is_not_a_substring_match(self, client, make_course):
        make_course(category="Design")
        assert client.get("/courses", params={"category": "des"}).json() == []

    def test_category_regex_characters_are_literal(self, client, make_course):
        make_course(category="Design")
        assert client.get("/courses", params={"category": "D.*"}).json() == []

    def test_owner_filter_is_exact(self, client, make_course):
        make_course(owner="a@example.com")
        make_course(owner="b@example.com")
        courses = client.get("/courses", params={"owner": "a@example.com"}).json()
        assert [c["owner"] for c in courses] == ["a@example.com"]

    def test_filters_are_combined(self, client, make_course):
        make_course(title="match", category="Design", owner="a@example.com")
        make_course(title="wrong owner", category="Design", owner="b@example.com")
        make_course(title="wrong category", category="Code", owner="a@example.com")
        courses = client.get("/courses", params={"category": "design", "owner": "a@example.com"}).json()
        assert [c["title"] for c in courses] == ["match"]

    def test_no_match_is_empty_list(self, client):
        response = client.get("/courses", params={"category": "nothing"})
        assert response.status_code == 200
        assert response.json() == []


class TestUpdateCourse:
    def test_partial_update_keeps_other_fields(self, client, make_course):
        course_id = make_course(title="Old", price=10)
        response = client.patch(f"/courses/{course_id}", json={"price": 20})
        assert response.status_code == 200
        assert response.json()["modifiedCount"] == 1

        course = client.get(f"/courses/{course_id}").json()
        assert course["price"] == 20
        assert course["title"] == "Old"
        assert course["category"] == "Design"

    def test_unknown_id_matches_nothing(self, client):
        body = client.patch(f"/courses/{ObjectId()}", json={"price": 1}).json()
        assert body["matchedCount"] == 0
        assert body["modifiedCount"] == 0

    def test_malformed_id(self, client):
        response = client.patch("/courses/xyz", json={"price": 1})
        assert response.status_code == 500
        assert response.json() == {"message": "Failed to update course"}

    def test_failure_is_logged_once(self, client, caplog):
        with caplog.at_level(logging.INFO):
            client.patch("/courses/xyz", json={"price": 1})
        errors = [r for r in caplog.records if r.name.startswith("course_nest") and r.levelno >= logging.WARNING]
        assert len(errors) == 1
        assert errors[0].name == "course_nest.service"


class TestDeleteCourse:
    def test_delete(self, client, make_course):
        course_id = make_course()
        response = client.delete(f"/courses/{course_id}")
        assert response.json() == {"acknowledged": True, "deletedCount": 1}
        assert client.get(f"/courses/{course_id}").json() is None

    def test_delete_does_not_cascade_to_enrollments(self, client, make_course):
        course_id = make_course()
        client.post("/enrollments", json={"courseId": course_id, "studentEmail": "s@example.com"})
        client.delete(f"/courses/{course_id}")
        assert len(client.get("/enrollments").json()) == 1

    def test_malformed_id(self, client):
        response = client.delete("/courses/123")
        assert response.status_code == 500
        assert response.json() == {"message": "Failed to delete course"}
