"""
Recorder component: capture a dream and follow it through the pipeline.

States: idle -> processing -> completed

The browser records with ``st.audio_input``; the clip is converted to
16 kHz mono PCM and streamed to ``/ws/record`` at real-time pace so the
server's chunk timer and 60 s ceiling see the same timing as a live
microphone.
"""

import asyncio
import io
import json
import logging

import numpy as np
import soundfile as sf
import streamlit as st

from dreamscape.ui.utils import ws_url_for

logger = logging.getLogger(__name__)

SAMPLE_RATE = 16000
BYTES_PER_SECOND = SAMPLE_RATE * 2
FRAME_SECONDS = 0.25


def _convert_to_pcm_16k_mono(audio_bytes: bytes) -> bytes:
    """Read uploaded WAV/audio bytes, resample to 16 kHz mono PCM int16."""
    data, sample_rate = sf.read(io.BytesIO(audio_bytes), dtype="float32")

    if data.ndim > 1:
        data = data.mean(axis=1)

    if sample_rate != SAMPLE_RATE:
        duration = len(data) / sample_rate
        num_samples = int(duration * SAMPLE_RATE)
        indices = np.linspace(0, len(data) - 1, num_samples)
        data = np.interp(indices, np.arange(len(data)), data)

    pcm = (data * 32767).clip(-32768, 32767).astype(np.int16)
    return pcm.tobytes()


async def _record_over_ws(
    ws_url: str, pcm_bytes: bytes, result_timeout: float = 1200.0
) -> list[dict]:
    """Stream *pcm_bytes* as one capture session and collect server messages.

    Returns once the server reports the archived dream or an error, or the
    timeout elapses.
    """
    import websockets
    from websockets.exceptions import ConnectionClosed

    messages: list[dict] = []
    done = asyncio.Event()

    async def _receiver(ws) -> None:  # noqa: ANN001
        try:
            async for raw in ws:
                try:
                    msg = json.loads(raw)
                except (json.JSONDecodeError, TypeError):
                    continue
                messages.append(msg)
                if msg.get("type") in ("dream", "error"):
                    done.set()
        except ConnectionClosed:
            pass
        finally:
            done.set()

    try:
        async with websockets.connect(ws_url, max_size=None) as ws:
            await ws.recv()  # "connected"
            recv_task = asyncio.create_task(_receiver(ws))

            await ws.send(json.dumps({"type": "start", "sample_rate": SAMPLE_RATE}))
            frame = int(BYTES_PER_SECOND * FRAME_SECONDS)
            for offset in range(0, len(pcm_bytes), frame):
                if done.is_set():
                    break
                await ws.send(pcm_bytes[offset : offset + frame])
                await asyncio.sleep(FRAME_SECONDS)
            await ws.send(json.dumps({"type": "stop"}))

            try:
                await asyncio.wait_for(done.wait(), timeout=result_timeout)
            except TimeoutError:
                timeout_msg = {"message": "Timed out waiting for the dream"}
                messages.append({"type": "error", "data": timeout_msg})
            await ws.close()
            recv_task.cancel()
    except Exception as exc:
        logger.warning("WebSocket error: %s", exc)
        messages.append({"type": "error", "data": {"message": str(exc)}})

    return messages


def _process_audio(audio_bytes: bytes) -> None:
    ws_url = ws_url_for(st.session_state.api_base_url, "/ws/record")
    try:
        pcm_bytes = _convert_to_pcm_16k_mono(audio_bytes)
        messages = asyncio.run(_record_over_ws(ws_url, pcm_bytes))
    except Exception as exc:
        st.error(f"Processing failed: {exc}")
        st.session_state.recording_status = "idle"
        return

    st.session_state.emojis = [
        m["data"]["emoji"] for m in messages if m.get("type") == "emoji" and m["data"].get("emoji")
    ]
    dreams = [m["data"] for m in messages if m.get("type") == "dream"]
    errors = [m["data"].get("message", "") for m in messages if m.get("type") == "error"]
    st.session_state.last_dream = dreams[-1] if dreams else None
    st.session_state.recording_error = errors[-1] if errors and not dreams else None
    st.session_state.recording_status = "completed"


def render_recorder() -> None:
    """Render the recording UI for the current session state."""
    status = st.session_state.recording_status

    if status == "idle":
        _render_idle()
    elif status == "processing":
        _render_processing()
    elif status == "completed":
        _render_completed()


def _render_idle() -> None:
    st.caption("Describe your dream out loud. Recording stops on its own after 60 seconds.")
    audio = st.audio_input("Record your dream")
    if audio is not None:
        st.session_state.recording_status = "processing"
        st.session_state._pending_audio = audio.getvalue()
        st.rerun()


def _render_processing() -> None:
    audio_bytes = st.session_state.pop("_pending_audio", None)
    if audio_bytes is None:
        st.session_state.recording_status = "idle"
        st.rerun()
        return

    with st.spinner("Turning your dream into a video..."):
        _process_audio(audio_bytes)

    st.rerun()


def _render_completed() -> None:
    emojis = st.session_state.emojis
    if emojis:
        st.markdown(" ".join(emojis))

    dream = st.session_state.last_dream
    if dream:
        st.success("Dream saved to your archive!")
        st.subheader(dream.get("ai_title", ""))
        st.write(dream.get("ai_description", ""))
        if dream.get("video_url"):
            st.video(dream["video_url"])
    else:
        st.error(st.session_state.recording_error or "Something went wrong")

    if st.button("Record another dream"):
        st.session_state.recording_status = "idle"
        st.session_state.emojis = []
        st.session_state.last_dream = None
        st.session_state.recording_error = None
        st.rerun()
