# tests/conftest.py
from __future__ import annotations

import threading
from typing import Callable, Dict, List, Optional, Union

import pytest

from smartvideo.common import settings as settings_mod
from smartvideo.domain.entities.descriptor import (
    AffineTransform,
    AudioTrackDescriptor,
    MediaTrackDescriptor,
    VideoTrackDescriptor,
)

ROT_90 = AffineTransform(a=0.0, b=1.0, c=-1.0, d=0.0)


@pytest.fixture(autouse=True)
def _clean_settings(monkeypatch):
    """Fresh settings per test; never read a developer's .env."""
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setitem(settings_mod.Settings.model_config, "env_file", None)
    settings_mod.get_settings.cache_clear()
    yield
    settings_mod.get_settings.cache_clear()


def make_descriptor(source: str = "/videos/clip.mp4", **overrides) -> MediaTrackDescriptor:
    """The 1920x1080 / 90 degree / avc1 + mp4a reference descriptor, with overrides."""
    video = overrides.pop(
        "video",
        VideoTrackDescriptor(
            width=1920,
            height=1080,
            transform=ROT_90,
            fps=29.97,
            codec_tag="avc1",
            bitrate=2_000_000,
        ),
    )
    audio = overrides.pop(
        "audio",
        AudioTrackDescriptor(codec_tag="mp4a", sample_rate=44100, channels=2),
    )
    fields = dict(
        source=source,
        video=video,
        audio=audio,
        duration_ms=5000,
        has_subtitles=False,
        stream_count=2,
    )
    fields.update(overrides)
    return MediaTrackDescriptor(**fields)


class FakeProbe:
    """
    MediaProbePort test double. `script` maps a source to the descriptor to
    return or the exception to raise; unknown sources get make_descriptor().
    Calls are recorded on the class so a factory can create fresh instances.
    """

    calls: List[str] = []
    script: Dict[str, Union[MediaTrackDescriptor, Exception]] = {}
    gate: Optional[threading.Event] = None

    def probe(self, source: str) -> MediaTrackDescriptor:
        type(self).calls.append(source)
        if type(self).gate is not None:
            type(self).gate.wait(timeout=5)
        val = type(self).script.get(source)
        if isinstance(val, Exception):
            raise val
        return val if val is not None else make_descriptor(source)

    @classmethod
    def _reset(cls) -> None:
        cls.calls = []
        cls.script = {}
        cls.gate = None


@pytest.fixture()
def fake_probe() -> Callable[[], FakeProbe]:
    FakeProbe._reset()
    yield FakeProbe
    FakeProbe._reset()


@pytest.fixture()
def descriptor_factory():
    return make_descriptor

