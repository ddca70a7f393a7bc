"""Unit tests for the Streamlit-side APIClient."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from dreamscape.ui.api_client import APIClient, APIError


@pytest.fixture
def client():
    """Create an APIClient with a mocked httpx.Client."""
    with patch("dreamscape.ui.api_client.httpx.Client") as mock_cls:
        mock_http = MagicMock()
        mock_cls.return_value = mock_http
        api = APIClient(base_url="http://test:8000")
        api._mock_http = mock_http
        yield api


class TestDreams:
    def test_list_dreams(self, client):
        resp = MagicMock()
        resp.json.return_value = [{"id": "a"}]
        client._mock_http.get.return_value = resp

        assert client.list_dreams() == [{"id": "a"}]
        client._mock_http.get.assert_called_once_with("/api/v1/dreams")
        resp.raise_for_status.assert_called_once()

    def test_rename_dream(self, client):
        client._mock_http.patch.return_value = MagicMock()
        client.rename_dream("a", "New title")
        client._mock_http.patch.assert_called_once_with(
            "/api/v1/dreams/a", json={"user_title": "New title"}
        )

    def test_delete_dream(self, client):
        client._mock_http.delete.return_value = MagicMock()
        client.delete_dream("a")
        client._mock_http.delete.assert_called_once_with("/api/v1/dreams/a")

    def test_save_profile(self, client):
        client._mock_http.put.return_value = MagicMock()
        client.save_profile({"visual_style": "abstract"})
        client._mock_http.put.assert_called_once_with(
            "/api/v1/profile", json={"visual_style": "abstract"}
        )


class TestErrors:
    def test_http_error_uses_envelope_message(self, client):
        request = httpx.Request("GET", "http://test:8000/api/v1/dreams/x")
        response = httpx.Response(
            404, json={"success": False, "error": "Dream not found: x"}, request=request
        )
        resp = MagicMock()
        resp.raise_for_status.side_effect = httpx.HTTPStatusError(
            "404", request=request, response=response
        )
        client._mock_http.get.return_value = resp

        with pytest.raises(APIError) as exc_info:
            client.get_dream("x")
        assert exc_info.value.message == "Dream not found: x"
        assert exc_info.value.category == "http"

    def test_connection_error(self, client):
        client._mock_http.get.side_effect = httpx.ConnectError("refused")
        ok, message = client.check_connection()
        assert ok is False
        assert "not running" in message

    def test_timeout(self, client):
        client._mock_http.get.side_effect = httpx.ReadTimeout("slow")
        with pytest.raises(APIError) as exc_info:
            client.list_dreams()
        assert exc_info.value.category == "timeout"
