"""Integration tests for API endpoints.

These tests verify API endpoints work correctly end-to-end. The dashboard uses
the real clock, so task dates are built relative to `datetime.now()`.
"""

from datetime import datetime, timedelta
from urllib.parse import quote

from studynext.models.course import CourseRecord


def _course_payload(assignments=(), exams=(), **overrides):
    return {
        "id": "chat-1",
        "title": "Bio chat",
        "course_code": "BIO 101",
        "course_name": "Introduction to Biology",
        "assignments": list(assignments),
        "exams": list(exams),
        **overrides,
    }


def _completion_url(task_id: str) -> str:
    return f"/tasks/{quote(task_id, safe='')}/completion"


def _tomorrow_noon() -> datetime:
    today = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
    return today + timedelta(days=1, hours=12)


def _next_week_start() -> datetime:
    today = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
    this_sunday = today - timedelta(days=(today.weekday() + 1) % 7)
    return this_sunday + timedelta(days=7)


class TestHealthAndAuth:

    def test_health(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_no_identity_is_unauthorized(self, test_client):
        assert test_client.get("/dashboard").status_code == 401

    def test_invalid_token(self, test_client):
        response = test_client.get("/dashboard", headers={"Authorization": "Bearer not-a-token"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired token"

    def test_token_for_unknown_user(self, test_client):
        from studynext.auth.jwt import create_access_token

        headers = {"Authorization": f"Bearer {create_access_token('ghost')}"}

        assert test_client.get("/dashboard", headers=headers).status_code == 401

    def test_expired_token(self, test_client, test_user_id):
        from studynext.auth.jwt import create_access_token

        token = create_access_token(test_user_id, expires_in=timedelta(seconds=-10))
        response = test_client.get("/dashboard", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401


class TestCourseEndpoints:

    def test_guest_courses_are_kept_per_session(self, test_client, guest_headers):
        response = test_client.post("/courses", json=_course_payload(), headers=guest_headers)

        assert response.status_code == 201
        assert response.json()["courseCode"] == "BIO 101"

        mine = test_client.get("/courses", headers=guest_headers).json()
        other = test_client.get("/courses", headers={"X-Guest-Session": "someone-else"}).json()
        assert mine["count"] == 1
        assert other["count"] == 0

    def test_durable_course_is_stamped_with_owner(self, test_client, auth_headers, course_repository, test_user_id):
        response = test_client.post(
            "/courses",
            json=_course_payload(assignments=[{"name": "Essay 1", "dueDate": "2030-01-15"}]),
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert course_repository.get("chat-1").user_id == test_user_id
        listed = test_client.get("/courses", headers=auth_headers).json()
        assert [c["id"] for c in listed["courses"]] == ["chat-1"]

    def test_cannot_overwrite_foreign_course(self, test_client, auth_headers, course_repository, other_user_id):
        course_repository.upsert(CourseRecord(id="chat-1", user_id=other_user_id, title="Theirs"))

        response = test_client.post("/courses", json=_course_payload(), headers=auth_headers)

        assert response.status_code == 403
        assert course_repository.get("chat-1").title == "Theirs"


class TestDashboard:

    def test_empty_dashboard(self, test_client, guest_headers):
        body = test_client.get("/dashboard", headers=guest_headers).json()

        assert body["priorities"] == []
        assert body["agenda"] == []
        assert body["triage"] is None
        assert body["nudge"] is None
        assert body["next_step"] is None

    def test_due_tomorrow_warning_and_priority(self, test_client, guest_headers):
        payload = _course_payload(assignments=[
            {"name": "Essay 1", "dueDate": _tomorrow_noon().isoformat(), "weight": "10"},
            {"name": "Old Essay", "dueDate": "2001-01-01"},
            {"name": "Undated", "dueDate": "TBD"},
        ])
        test_client.post("/courses", json=payload, headers=guest_headers)

        body = test_client.get("/dashboard", headers=guest_headers).json()

        assert [t["name"] for t in body["priorities"]] == ["Essay 1"]
        assert body["priorities"][0]["priority"] == 1
        assert body["nudge"]["type"] == "warning"
        assert body["nudge"]["priority"] == "high"
        assert body["next_step"]["kind"] == "assignment"

    def test_triage_dialog_shows_once(self, test_client, guest_headers):
        start = _next_week_start()
        payload = _course_payload(assignments=[
            {"name": f"Problem Set {i}", "dueDate": (start + timedelta(days=i, hours=12)).isoformat()}
            for i in (1, 2, 3)
        ])
        test_client.post("/courses", json=payload, headers=guest_headers)

        first = test_client.get("/dashboard", headers=guest_headers).json()
        second = test_client.get("/dashboard", headers=guest_headers).json()

        assert first["triage"]["is_active"] is True
        assert len(first["triage"]["tasks"]) == 3
        assert first["show_triage_dialog"] is True
        assert second["triage"]["week"] == first["triage"]["week"]
        assert second["show_triage_dialog"] is False


class TestCompletionToggle:

    def test_guest_toggle_is_local(self, test_client, guest_headers):
        due = (datetime.now() + timedelta(days=2)).isoformat()
        test_client.post("/courses", json=_course_payload(assignments=[{"name": "Essay 1", "dueDate": due}]), headers=guest_headers)

        response = test_client.post(_completion_url("chat-1-Essay 1"), headers=guest_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["outcome"] == "local"
        assert body["completed"] is True
        assert body["status"] == "Completed"

        dashboard = test_client.get("/dashboard", headers=guest_headers).json()
        assert dashboard["priorities"] == []
        assert dashboard["agenda"][0]["status"] == "Completed"
        assert dashboard["nudge"]["message"].startswith("Great job!")

    def test_toggle_back(self, test_client, guest_headers):
        due = (datetime.now() + timedelta(days=2)).isoformat()
        test_client.post("/courses", json=_course_payload(exams=[{"name": "Midterm", "date": due}]), headers=guest_headers)

        test_client.post(_completion_url("chat-1-Midterm-exam"), headers=guest_headers)
        body = test_client.post(_completion_url("chat-1-Midterm-exam"), headers=guest_headers).json()

        assert body["completed"] is False
        assert body["status"] == "Upcoming"
        assert body["message"] == "Midterm has been marked as incomplete."

    def test_durable_toggle_syncs_to_store(self, test_client, auth_headers, course_repository):
        due = (datetime.now() + timedelta(days=2)).isoformat()
        test_client.post("/courses", json=_course_payload(assignments=[{"name": "Essay 1", "dueDate": due}]), headers=auth_headers)

        response = test_client.post(_completion_url("chat-1-Essay 1"), headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["outcome"] == "synced"
        assert course_repository.get("chat-1").assignments[0].status == "Completed"

    def test_unknown_task(self, test_client, guest_headers):
        response = test_client.post(_completion_url("chat-1-Nope"), headers=guest_headers)

        assert response.status_code == 404

    def test_resaved_record_wins_over_synced_toggle(self, test_client, auth_headers):
        due = (datetime.now() + timedelta(days=2)).isoformat()
        payload = _course_payload(assignments=[{"name": "Essay 1", "dueDate": due}])
        test_client.post("/courses", json=payload, headers=auth_headers)
        assert test_client.post(_completion_url("chat-1-Essay 1"), headers=auth_headers).json()["outcome"] == "synced"

        # ingestion re-saves the course with the status reset
        resaved = _course_payload(assignments=[{"name": "Essay 1", "dueDate": due, "status": "Not Started"}])
        test_client.post("/courses", json=resaved, headers=auth_headers)

        dashboard = test_client.get("/dashboard", headers=auth_headers).json()
        assert dashboard["agenda"][0]["status"] == "Not Started"
        assert [t["name"] for t in dashboard["priorities"]] == ["Essay 1"]

        again = test_client.post(_completion_url("chat-1-Essay 1"), headers=auth_headers).json()
        assert again["completed"] is True
        assert again["status"] == "Completed"
