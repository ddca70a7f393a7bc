"""Unit tests for PushAudioSource fan-out."""

import pytest

from dreamscape.core.exceptions import MicrophoneUnavailableError
from dreamscape.services.audio.source import PushAudioSource


class _Sink:
    def __init__(self):
        self.received = bytearray()

    def feed(self, data: bytes) -> None:
        self.received.extend(data)


async def test_fan_out_to_every_sink():
    source = PushAudioSource()
    await source.open()
    first, second = _Sink(), _Sink()
    source.attach(first)
    source.attach(second)

    source.write(b"\x01\x02")
    source.detach(second)
    source.write(b"\x03\x04")

    assert bytes(first.received) == b"\x01\x02\x03\x04"
    assert bytes(second.received) == b"\x01\x02"
    assert source.bytes_received == 4


async def test_writes_ignored_while_closed():
    source = PushAudioSource()
    sink = _Sink()
    source.attach(sink)
    source.write(b"\x01\x02")
    assert sink.received == bytearray()
    assert source.bytes_received == 0


async def test_rate_mismatch_refused():
    source = PushAudioSource(sample_rate=44100, expected_rate=16000)
    with pytest.raises(MicrophoneUnavailableError, match="44100"):
        await source.open()
    assert not source.is_open


async def test_close_detaches_and_reopen_works():
    source = PushAudioSource()
    await source.open()
    sink = _Sink()
    source.attach(sink)
    await source.close()
    assert not source.is_open

    await source.open()
    source.write(b"\x01\x02")
    assert sink.received == bytearray()
