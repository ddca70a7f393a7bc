"""Integration tests for REST API endpoints over a temporary local archive."""

from dreamscape.core.exceptions import VideoGenerationError
from dreamscape.core.models import DEFAULT_EMOJI

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


async def test_health(async_client):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["version"] == "0.1.0"


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


async def test_transcribe_returns_text_and_emoji(async_client, mock_llm, mock_stt, sample_wav_bytes):
    mock_llm.generate.return_value = "\U0001f985"
    resp = await async_client.post(
        "/api/v1/transcribe", files={"audio": ("dream.wav", sample_wav_bytes, "audio/wav")}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["result"]["text"] == "I was flying over snowy mountains."
    assert body["emoji"] == "\U0001f985"

    _, filename = mock_stt.transcribe.call_args.args
    assert filename.endswith("-audio.wav")


async def test_transcribe_webm_keeps_extension(async_client, mock_stt, sample_wav_bytes):
    resp = await async_client.post(
        "/api/v1/transcribe", files={"audio": ("clip", sample_wav_bytes, "audio/webm")}
    )
    assert resp.status_code == 200
    assert mock_stt.transcribe.call_args.args[1].endswith(".webm")


async def test_transcribe_missing_file(async_client):
    resp = await async_client.post("/api/v1/transcribe")
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["code"] == "INVALID_AUDIO"
    assert body["error"] == "No audio file provided"


async def test_transcribe_too_small(async_client, mock_stt):
    resp = await async_client.post(
        "/api/v1/transcribe", files={"audio": ("tiny.wav", b"RIFF" + b"\x00" * 60, "audio/wav")}
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_AUDIO"
    mock_stt.transcribe.assert_not_called()


async def test_transcribe_too_large(async_client, mock_stt):
    resp = await async_client.post(
        "/api/v1/transcribe", files={"audio": ("big.wav", b"\x01" * (70 * 1024), "audio/wav")}
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "INVALID_AUDIO"
    mock_stt.transcribe.assert_not_called()


async def test_transcribe_silence_gets_default_emoji(async_client, mock_llm, mock_stt, sample_wav_bytes):
    from dreamscape.core.models import TranscriptionResult

    mock_stt.transcribe.return_value = TranscriptionResult(text="")
    resp = await async_client.post(
        "/api/v1/transcribe", files={"audio": ("dream.wav", sample_wav_bytes, "audio/wav")}
    )
    assert resp.status_code == 200
    assert resp.json()["emoji"] == DEFAULT_EMOJI
    mock_llm.generate.assert_not_called()


# ---------------------------------------------------------------------------
# Structuring & emoji
# ---------------------------------------------------------------------------


async def test_structure(async_client):
    resp = await async_client.post("/api/v1/structure", json={"transcript": "I could fly."})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["structuredData"]["title"] == "Flight"


async def test_structure_unparseable_reply_is_null(async_client, mock_llm):
    mock_llm.generate.return_value = "Sorry, I cannot help with that."
    resp = await async_client.post("/api/v1/structure", json={"transcript": "I could fly."})
    assert resp.status_code == 200
    assert resp.json()["structuredData"] is None


async def test_structure_requires_transcript(async_client):
    for payload in ({}, {"transcript": ""}, {"transcript": "   "}):
        resp = await async_client.post("/api/v1/structure", json=payload)
        assert resp.status_code == 400
        assert resp.json()["code"] == "TRANSCRIPT_REQUIRED"


async def test_structure_provider_failure(async_client, mock_llm):
    mock_llm.generate.side_effect = RuntimeError("rate limited")
    resp = await async_client.post("/api/v1/structure", json={"transcript": "I could fly."})
    assert resp.status_code == 502
    assert resp.json()["code"] == "STRUCTURING_ERROR"


async def test_emoji(async_client, mock_llm):
    mock_llm.generate.return_value = "\U0001f30a"
    resp = await async_client.post("/api/v1/emoji", json={"transcript": "The sea rose up."})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "emoji": "\U0001f30a"}


async def test_emoji_blank_transcript_default(async_client, mock_llm):
    resp = await async_client.post("/api/v1/emoji", json={"transcript": "   "})
    assert resp.status_code == 200
    assert resp.json()["emoji"] == DEFAULT_EMOJI
    mock_llm.generate.assert_not_called()


async def test_emoji_missing_transcript(async_client):
    resp = await async_client.post("/api/v1/emoji", json={})
    assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Video generation
# ---------------------------------------------------------------------------


async def test_generate_video(async_client, mock_video):
    resp = await async_client.post(
        "/api/v1/generate-video",
        json={"transcript": {"title": "Flight"}, "options": {"aspectRatio": "9:16"}},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["videoUrls"] == ["https://videos.example/dream.mp4?alt=media&key=test"]

    prompt, options = mock_video.generate.call_args.args
    assert prompt == {"title": "Flight"}
    assert options.aspect_ratio.value == "9:16"


async def test_generate_video_requires_transcript(async_client, mock_video):
    resp = await async_client.post("/api/v1/generate-video", json={})
    assert resp.status_code == 400
    assert resp.json()["code"] == "TRANSCRIPT_REQUIRED"
    mock_video.generate.assert_not_called()


async def test_generate_video_provider_error(async_client, mock_video):
    mock_video.generate.side_effect = VideoGenerationError("Operation failed: quota")
    resp = await async_client.post("/api/v1/generate-video", json={"transcript": "a dream"})
    assert resp.status_code == 502
    body = resp.json()
    assert body["code"] == "VIDEO_GENERATION_ERROR"
    assert body["error"] == "Operation failed: quota"


# ---------------------------------------------------------------------------
# Dream archive
# ---------------------------------------------------------------------------


async def test_dream_lifecycle(async_client, make_draft):
    """POST create -> GET list -> PATCH rename -> DELETE."""
    resp = await async_client.post("/api/v1/dreams", json=make_draft().model_dump())
    assert resp.status_code == 201
    dream = resp.json()
    dream_id = dream["id"]
    assert dream["ai_title"] == "Flight"
    assert dream["user_title"] is None
    assert dream["created_at"]

    resp = await async_client.get("/api/v1/dreams")
    assert [d["id"] for d in resp.json()] == [dream_id]

    resp = await async_client.patch(
        f"/api/v1/dreams/{dream_id}", json={"user_title": "  Soaring  "}
    )
    assert resp.status_code == 200
    assert resp.json()["user_title"] == "Soaring"

    resp = await async_client.patch(f"/api/v1/dreams/{dream_id}", json={"user_title": "   "})
    assert resp.json()["user_title"] is None

    resp = await async_client.delete(f"/api/v1/dreams/{dream_id}")
    assert resp.status_code == 200
    assert resp.json() == {"id": dream_id, "deleted": True}

    resp = await async_client.get(f"/api/v1/dreams/{dream_id}")
    assert resp.status_code == 404


async def test_dreams_newest_first(async_client, make_draft):
    first = await async_client.post("/api/v1/dreams", json=make_draft(ai_title="A").model_dump())
    second = await async_client.post("/api/v1/dreams", json=make_draft(ai_title="B").model_dump())
    resp = await async_client.get("/api/v1/dreams")
    assert [d["id"] for d in resp.json()] == [second.json()["id"], first.json()["id"]]


async def test_unknown_dream_envelope(async_client):
    resp = await async_client.get("/api/v1/dreams/missing")
    assert resp.status_code == 404
    body = resp.json()
    assert body["success"] is False
    assert body["code"] == "DREAM_NOT_FOUND"
    assert body["error"] == "Dream not found: missing"
    assert "timestamp" in body


async def test_create_dream_validation_error(async_client):
    resp = await async_client.post("/api/v1/dreams", json={"ai_title": "Only a title"})
    assert resp.status_code == 422
    assert resp.json()["code"] == "VALIDATION_ERROR"


# ---------------------------------------------------------------------------
# Dreamer profile
# ---------------------------------------------------------------------------


async def test_profile_defaults(async_client):
    resp = await async_client.get("/api/v1/profile")
    assert resp.status_code == 200
    assert resp.json() == {
        "self_description": "",
        "triggers_and_boundaries": "",
        "visual_style": "",
    }


async def test_profile_roundtrip(async_client):
    profile = {
        "self_description": "Tall, curly red hair",
        "triggers_and_boundaries": "no spiders",
        "visual_style": "surreal",
    }
    resp = await async_client.put("/api/v1/profile", json=profile)
    assert resp.status_code == 200
    assert (await async_client.get("/api/v1/profile")).json() == profile


async def test_profile_rejects_unknown_style(async_client):
    resp = await async_client.put("/api/v1/profile", json={"visual_style": "noir"})
    assert resp.status_code == 422
