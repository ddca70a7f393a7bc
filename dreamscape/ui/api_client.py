"""
Synchronous HTTP client for the Dreamscape backend API.

Uses ``httpx.Client`` (sync) because Streamlit scripts run synchronously.
Every failure becomes an :class:`APIError` whose message can be shown to
the dreamer as-is.
"""

import logging
from typing import Any

import httpx
import streamlit as st

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class APIError(Exception):
    """Displayable API failure.

    Categories: "connection", "timeout", "http", "network".
    """

    def __init__(self, message: str, category: str = "network") -> None:
        self.message = message
        self.category = category
        super().__init__(message)


def _error_detail(response: httpx.Response) -> str:
    """The ``error`` field of the backend's error envelope, or the raw body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text


def _as_api_error(exc: httpx.HTTPError) -> APIError:
    if isinstance(exc, httpx.ConnectError):
        return APIError(
            "Dreamscape backend is not running. "
            "Start it with: `uvicorn dreamscape.api.app:app --reload --port 8000`",
            category="connection",
        )
    if isinstance(exc, httpx.TimeoutException):
        return APIError("The backend took too long to answer.", category="timeout")
    if isinstance(exc, httpx.HTTPStatusError):
        return APIError(_error_detail(exc.response), category="http")
    return APIError(f"Network error: {exc}", category="network")


class APIClient:
    """Dream archive and profile calls against the FastAPI backend."""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout)

    def _call(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = getattr(self._client, method)(path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            error = _as_api_error(exc)
            logger.warning("%s %s failed (%s): %s", method.upper(), path, error.category, error)
            raise error from None
        return response.json()

    def health_check(self) -> dict:
        return self._call("get", "/health")

    def check_connection(self) -> tuple[bool, str]:
        """Return ``(reachable, message)`` for the sidebar status line."""
        try:
            self.health_check()
        except APIError as exc:
            return False, exc.message
        return True, "Connected"

    # -- dreams --

    def list_dreams(self) -> list[dict]:
        return self._call("get", f"{API_PREFIX}/dreams")

    def get_dream(self, dream_id: str) -> dict:
        return self._call("get", f"{API_PREFIX}/dreams/{dream_id}")

    def rename_dream(self, dream_id: str, user_title: str | None) -> dict:
        return self._call("patch", f"{API_PREFIX}/dreams/{dream_id}", json={"user_title": user_title})

    def delete_dream(self, dream_id: str) -> dict:
        return self._call("delete", f"{API_PREFIX}/dreams/{dream_id}")

    # -- profile --

    def get_profile(self) -> dict:
        return self._call("get", f"{API_PREFIX}/profile")

    def save_profile(self, profile: dict) -> dict:
        return self._call("put", f"{API_PREFIX}/profile", json=profile)


@st.cache_resource
def get_api_client(base_url: str = "http://localhost:8000") -> APIClient:
    """One client per backend URL for the lifetime of the Streamlit server."""
    return APIClient(base_url=base_url)
