"""
Tests for the client-side session state and HTTP API client.
The backend is replaced by an httpx.MockTransport.
"""

import json

import httpx
import pytest

from fittrack.client import ApiError, FitTrackClient, SessionState


class TestSessionState:
    """Tests for SessionState."""

    def test_starts_signed_out(self):
        session = SessionState()
        assert session.is_authenticated is False
        assert session.user_id is None

    def test_set_notifies_listeners(self):
        session = SessionState()
        seen = []
        session.subscribe(lambda s: seen.append(s.user_id))

        session.set("u1", "alex@example.com", "tok")
        assert seen == ["u1"]
        assert session.is_authenticated is True

    def test_no_notification_without_change(self):
        session = SessionState()
        seen = []
        session.subscribe(lambda s: seen.append(s.user_id))

        session.set("u1", "alex@example.com", "tok")
        session.set("u1", "alex@example.com", "tok")
        session.clear()
        session.clear()
        assert seen == ["u1", None]

    def test_switching_user_notifies(self):
        session = SessionState()
        seen = []
        session.subscribe(lambda s: seen.append(s.email))

        session.set("u1", "alex@example.com", "tok1")
        session.set("u2", "sam@example.com", "tok2")
        assert seen == ["alex@example.com", "sam@example.com"]

    def test_unsubscribe(self):
        session = SessionState()
        seen = []
        unsubscribe = session.subscribe(lambda s: seen.append(s.user_id))

        unsubscribe()
        unsubscribe()
        session.set("u1", "alex@example.com", "tok")
        assert seen == []


class FakeBackend:
    """Records requests and answers them from a small route table."""

    def __init__(self):
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = (request.method, request.url.path)

        if route == ("POST", "/login"):
            body = json.loads(request.content)
            if body["password"] != "secret1":
                return httpx.Response(401, json={"detail": "Invalid login credentials"})
            return httpx.Response(200, json={
                "access_token": "tok-123", "token_type": "bearer",
                "user_id": "u1", "email": body["email"],
            })
        if route == ("GET", "/stats"):
            if request.headers.get("Authorization") != "Bearer tok-123":
                return httpx.Response(401, json={"detail": "Could not validate credentials"})
            return httpx.Response(200, json={
                "caloriesConsumed": 750, "caloriesBurned": 300,
                "workoutCompleted": True, "steps": 4100,
            })
        if route == ("POST", "/workouts/log"):
            return httpx.Response(201, json={"success": True, "logId": "u1:1700000000000"})
        if route == ("GET", "/workouts"):
            return httpx.Response(200, json={"workouts": [{"id": "1", "name": "Full Body Strength"}]})
        if route == ("POST", "/posture/analyze"):
            return httpx.Response(200, json={"score": "Good", "mistakes": ["Keep your core engaged"]})
        if route == ("GET", "/boom"):
            return httpx.Response(500, text="upstream exploded")
        return httpx.Response(404, json={"detail": "Not Found"})


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def api(backend):
    return FitTrackClient("http://fittrack.test", transport=httpx.MockTransport(backend))


class TestFitTrackClient:
    """Tests for FitTrackClient."""

    @pytest.mark.asyncio
    async def test_sign_in_sets_session(self, api):
        seen = []
        api.session.subscribe(lambda s: seen.append(s.user_id))

        session = await api.sign_in("alex@example.com", "secret1")

        assert session.access_token == "tok-123"
        assert session.user_id == "u1"
        assert seen == ["u1"]
        await api.aclose()

    @pytest.mark.asyncio
    async def test_failed_sign_in_leaves_session_empty(self, api):
        with pytest.raises(ApiError) as exc_info:
            await api.sign_in("alex@example.com", "wrong")

        assert exc_info.value.is_unauthorized
        assert exc_info.value.detail == "Invalid login credentials"
        assert api.session.is_authenticated is False
        await api.aclose()

    @pytest.mark.asyncio
    async def test_bearer_token_attached(self, api, backend):
        await api.sign_in("alex@example.com", "secret1")
        stats = await api.stats("2024-03-15")

        assert stats["caloriesConsumed"] == 750
        request = backend.requests[-1]
        assert request.headers["Authorization"] == "Bearer tok-123"
        assert request.url.params["date"] == "2024-03-15"
        await api.aclose()

    @pytest.mark.asyncio
    async def test_sign_out_drops_token(self, api, backend):
        await api.sign_in("alex@example.com", "secret1")
        api.sign_out()

        with pytest.raises(ApiError) as exc_info:
            await api.stats()
        assert exc_info.value.status_code == 401
        assert "Authorization" not in backend.requests[-1].headers
        await api.aclose()

    @pytest.mark.asyncio
    async def test_log_workout_returns_log_id(self, api, backend):
        log_id = await api.log_workout({"workoutId": "1", "duration": 30})
        assert log_id == "u1:1700000000000"
        assert json.loads(backend.requests[-1].content)["workoutId"] == "1"
        await api.aclose()

    @pytest.mark.asyncio
    async def test_list_workouts(self, api):
        async with api:
            workouts = await api.list_workouts()
        assert workouts[0]["name"] == "Full Body Strength"

    @pytest.mark.asyncio
    async def test_posture_upload_is_multipart(self, api, backend):
        result = await api.analyze_posture(b"\x89PNG", content_type="image/png")
        assert result["score"] == "Good"
        assert backend.requests[-1].headers["content-type"].startswith("multipart/form-data")
        await api.aclose()

    @pytest.mark.asyncio
    async def test_non_json_error_body(self, api):
        with pytest.raises(ApiError) as exc_info:
            await api._request("GET", "/boom")
        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "upstream exploded"
        await api.aclose()

    @pytest.mark.asyncio
    async def test_no_retry(self, api, backend):
        with pytest.raises(ApiError):
            await api._request("GET", "/boom")
        assert len(backend.requests) == 1
        await api.aclose()

    @pytest.mark.asyncio
    async def test_shared_session(self, backend):
        session = SessionState()
        first = FitTrackClient("http://fittrack.test", session, transport=httpx.MockTransport(backend))
        second = FitTrackClient("http://fittrack.test", session, transport=httpx.MockTransport(backend))

        await first.sign_in("alex@example.com", "secret1")
        assert second.session.access_token == "tok-123"

        await first.aclose()
        await second.aclose()
