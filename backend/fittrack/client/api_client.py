"""
FitTrack API client - async HTTP access to every backend operation.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .session import SessionState

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A non-2xx response. ``status_code`` 401 means the user must sign in again."""

    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


class FitTrackClient:
    """
    Thin wrapper around ``httpx.AsyncClient``.

    Every call is a single request with the transport's default timeout and
    no retry; failures surface as :class:`ApiError` or ``httpx.HTTPError``.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[SessionState] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Backend root URL
            session: Shared session state; a fresh one when None
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests, ASGI apps)
        """
        self.session = session or SessionState()
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "FitTrackClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _auth_headers(self) -> Dict[str, str]:
        if self.session.access_token is None:
            return {}
        return {"Authorization": f"Bearer {self.session.access_token}"}

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        response = await self._http.request(method, path, headers=self._auth_headers(), **kwargs)
        if response.is_error:
            try:
                detail = response.json()
            except ValueError:
                detail = response.text
            if isinstance(detail, dict):
                detail = detail.get("detail") or detail.get("error") or detail
            logger.warning(f"{method} {path} failed with {response.status_code}: {detail}")
            raise ApiError(response.status_code, detail)
        return response.json()

    # Identity and profile

    async def sign_up(self, email: str, password: str, **profile: Any) -> Dict[str, Any]:
        """Create an account with its profile. Does not sign in."""
        body = await self._request("POST", "/signup", json={"email": email, "password": password, **profile})
        return body["user"]

    async def sign_in(self, email: str, password: str) -> SessionState:
        """Sign in and store the token on the session."""
        token = await self._request("POST", "/login", json={"email": email, "password": password})
        self.session.set(token["user_id"], token["email"], token["access_token"])
        return self.session

    def sign_out(self) -> None:
        self.session.clear()

    async def get_profile(self) -> Optional[Dict[str, Any]]:
        return (await self._request("GET", "/profile"))["profile"]

    async def update_profile(self, **updates: Any) -> Dict[str, Any]:
        return (await self._request("PUT", "/profile", json=updates))["profile"]

    # Workouts

    async def list_workouts(self) -> List[Dict[str, Any]]:
        return (await self._request("GET", "/workouts"))["workouts"]

    async def log_workout(self, entry: Dict[str, Any]) -> str:
        return (await self._request("POST", "/workouts/log", json=entry))["logId"]

    async def workout_history(self) -> List[Dict[str, Any]]:
        return (await self._request("GET", "/workouts/history"))["workouts"]

    # Food

    async def log_food(self, entry: Dict[str, Any]) -> str:
        return (await self._request("POST", "/food/log", json=entry))["logId"]

    async def food_history(self, day: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"date": day} if day else None
        return (await self._request("GET", "/food/history", params=params))["foods"]

    async def meals(self, day: Optional[str] = None) -> Dict[str, Any]:
        params = {"date": day} if day else None
        return await self._request("GET", "/food/meals", params=params)

    async def analyze_food(self, image_url: str) -> Dict[str, Any]:
        return await self._request("POST", "/food/analyze", json={"imageUrl": image_url})

    # Coach

    async def chat(self, message: str) -> str:
        return (await self._request("POST", "/coach/chat", json={"message": message}))["response"]

    async def chat_history(self) -> List[Dict[str, Any]]:
        return (await self._request("GET", "/coach/history"))["messages"]

    async def daily_tip(self) -> str:
        return (await self._request("GET", "/coach/tip"))["tip"]

    # Progress

    async def stats(self, day: Optional[str] = None) -> Dict[str, Any]:
        params = {"date": day} if day else None
        return await self._request("GET", "/stats", params=params)

    async def progress(self) -> Dict[str, Any]:
        return await self._request("GET", "/stats/progress")

    async def log_weight(self, weight: float, date: Optional[str] = None) -> str:
        body: Dict[str, Any] = {"weight": weight}
        if date:
            body["date"] = date
        return (await self._request("POST", "/weight/log", json=body))["logId"]

    async def weight_history(self) -> List[Dict[str, Any]]:
        return (await self._request("GET", "/weight/history"))["weights"]

    async def analyze_posture(self, image: bytes, content_type: str = "image/png") -> Dict[str, Any]:
        files = {"image": ("frame", image, content_type)}
        return await self._request("POST", "/posture/analyze", files=files)
