"""UI utility functions."""

import base64
import math
from datetime import datetime

ARCHIVE_PAGE_SIZE = 16


def format_dream_date(value: str | datetime) -> str:
    """Format a record timestamp as ``MM.DD.YY``."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return value.strftime("%m.%d.%y")


def display_title(dream: dict) -> str:
    """The user's title when set, otherwise the generated one."""
    return dream.get("user_title") or dream.get("ai_title") or "Untitled Dream"


def paginate(items: list, page: int, per_page: int = ARCHIVE_PAGE_SIZE) -> tuple[list, int]:
    """Return the items on 1-based *page* and the total page count (at least 1)."""
    total_pages = max(1, math.ceil(len(items) / per_page))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return items[start : start + per_page], total_pages


def decode_data_uri(uri: str | None) -> bytes | None:
    """Return the payload of a base64 ``data:`` URI, or None for anything else."""
    if not uri or not uri.startswith("data:") or ";base64," not in uri:
        return None
    return base64.b64decode(uri.split(";base64,", 1)[1])


def ws_url_for(api_base_url: str, path: str) -> str:
    """Turn an ``http(s)://`` API base URL into the matching ``ws(s)://`` URL."""
    scheme = "wss" if api_base_url.startswith("https://") else "ws"
    host = api_base_url.replace("http://", "").replace("https://", "").rstrip("/")
    return f"{scheme}://{host}{path}"
