"""
Best-effort thumbnail capture for generated videos.

Downloads the video, grabs one frame with OpenCV and returns it as a
JPEG data URI. Every failure degrades to the static placeholder image.
"""

import asyncio
import base64
import logging
import tempfile
from pathlib import Path

import cv2
import httpx

logger = logging.getLogger(__name__)


def _grab_frame(video_path: str, max_width: int) -> bytes:
    """Return the first decodable frame of *video_path* as JPEG bytes."""
    capture = cv2.VideoCapture(video_path)
    try:
        ok, frame = capture.read()
    finally:
        capture.release()
    if not ok or frame is None:
        raise ValueError(f"No decodable frame in {video_path}")

    height, width = frame.shape[:2]
    if width > max_width:
        scale = max_width / width
        frame = cv2.resize(frame, (max_width, int(height * scale)), interpolation=cv2.INTER_AREA)

    ok, encoded = cv2.imencode(".jpg", frame)
    if not ok:
        raise ValueError("JPEG encoding failed")
    return encoded.tobytes()


class ThumbnailExtractor:
    """Produces a thumbnail string for a video URL.

    Args:
        placeholder: Image path returned when capture fails.
        timeout: Download timeout in seconds.
        max_width: Frames wider than this are scaled down.
    """

    def __init__(self, placeholder: str, timeout: float = 60.0, max_width: int = 480) -> None:
        self.placeholder = placeholder
        self._timeout = timeout
        self._max_width = max_width

    async def _download(self, url: str, dest: Path) -> None:
        async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
            async with client.stream("GET", url) as response:
                response.raise_for_status()
                with dest.open("wb") as fh:
                    async for chunk in response.aiter_bytes():
                        fh.write(chunk)

    async def extract(self, video_url: str) -> str:
        """Return a ``data:image/jpeg`` URI for *video_url*, or the placeholder."""
        try:
            with tempfile.TemporaryDirectory() as tmp:
                video_path = Path(tmp) / "video.mp4"
                await self._download(video_url, video_path)
                jpeg = await asyncio.to_thread(_grab_frame, str(video_path), self._max_width)
        except Exception:
            logger.warning("Thumbnail capture failed, using placeholder", exc_info=True)
            return self.placeholder

        return "data:image/jpeg;base64," + base64.b64encode(jpeg).decode("ascii")
