import json
import subprocess
from types import SimpleNamespace

import pytest

import smartvideo.services.probe.ffprobe_adapter as adapter_mod
from smartvideo.domain.errors import (
    MalformedDescriptorError,
    ProbeTimeoutError,
    SourceUnreadableError,
)
from smartvideo.services.probe.ffprobe_adapter import FFprobeAdapter

FFPROBE_JSON = {
    "format": {"duration": "2.0", "nb_streams": 1},
    "streams": [
        {
            "codec_type": "video",
            "codec_name": "vp9",
            "codec_tag_string": "vp09",
            "width": 1280,
            "height": 720,
            "r_frame_rate": "25/1",
        }
    ],
}


class _FakeRun:
    def __init__(self, *, stdout="", stderr="", returncode=0, raises=None):
        self.stdout, self.stderr, self.returncode, self.raises = stdout, stderr, returncode, raises
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        if self.raises is not None:
            raise self.raises
        return SimpleNamespace(stdout=self.stdout, stderr=self.stderr, returncode=self.returncode)


@pytest.fixture()
def clip(tmp_path):
    p = tmp_path / "clip.webm"
    p.write_bytes(b"dummy")
    return p


@pytest.fixture()
def which(monkeypatch):
    monkeypatch.setattr(adapter_mod.shutil, "which", lambda name: f"/usr/bin/{name.rsplit('/', 1)[-1]}")


def _install_run(monkeypatch, fake: _FakeRun) -> _FakeRun:
    monkeypatch.setattr(adapter_mod.subprocess, "run", fake)
    return fake


def test_missing_binary(monkeypatch):
    monkeypatch.setattr(adapter_mod.shutil, "which", lambda name: None)
    with pytest.raises(SourceUnreadableError, match="ffprobe not found"):
        FFprobeAdapter()


def test_probe_local_file(monkeypatch, which, clip):
    fake = _install_run(monkeypatch, _FakeRun(stdout=json.dumps(FFPROBE_JSON)))

    d = FFprobeAdapter().probe(str(clip))

    cmd, kwargs = fake.calls[0]
    assert cmd[0] == "/usr/bin/ffprobe"
    assert cmd[-1] == str(clip)
    # local files: no timeout unless configured
    assert kwargs["timeout"] is None
    assert d.video.codec_tag == "vp09"
    assert d.video.width == 1280
    assert d.duration_ms == pytest.approx(2000.0)


def test_local_timeout_from_settings(monkeypatch, which, clip):
    monkeypatch.setenv("FFPROBE__TIMEOUT_SEC", "7")
    fake = _install_run(monkeypatch, _FakeRun(stdout=json.dumps(FFPROBE_JSON)))
    FFprobeAdapter().probe(str(clip))
    assert fake.calls[0][1]["timeout"] == 7


def test_missing_file_is_unreadable(monkeypatch, which, tmp_path):
    fake = _install_run(monkeypatch, _FakeRun())
    with pytest.raises(SourceUnreadableError, match="File not found"):
        FFprobeAdapter().probe(str(tmp_path / "nope.mp4"))
    assert fake.calls == []


def test_remote_url_uses_load_timeout(monkeypatch, which):
    fake = _install_run(monkeypatch, _FakeRun(stdout=json.dumps(FFPROBE_JSON)))
    FFprobeAdapter().probe("https://cdn.example.com/clip.webm")
    assert fake.calls[0][1]["timeout"] == 10


def test_remote_timeout(monkeypatch, which):
    _install_run(monkeypatch, _FakeRun(raises=subprocess.TimeoutExpired(cmd="ffprobe", timeout=10)))
    with pytest.raises(ProbeTimeoutError, match="timed out after 10s"):
        FFprobeAdapter().probe("https://cdn.example.com/slow.mp4")


def test_unsupported_scheme(monkeypatch, which):
    fake = _install_run(monkeypatch, _FakeRun())
    with pytest.raises(SourceUnreadableError, match="Unsupported URL scheme"):
        FFprobeAdapter().probe("rtsp://camera.local/stream")
    assert fake.calls == []


def test_nonzero_exit_is_unreadable(monkeypatch, which, clip):
    _install_run(monkeypatch, _FakeRun(returncode=1, stderr="Invalid data found when processing input"))
    with pytest.raises(SourceUnreadableError, match="Invalid data found"):
        FFprobeAdapter().probe(str(clip))


def test_os_error_is_unreadable(monkeypatch, which, clip):
    _install_run(monkeypatch, _FakeRun(raises=PermissionError("denied")))
    with pytest.raises(SourceUnreadableError):
        FFprobeAdapter().probe(str(clip))


@pytest.mark.parametrize("stdout", ["{not json", "[1, 2, 3]"])
def test_bad_json_is_malformed(monkeypatch, which, clip, stdout):
    _install_run(monkeypatch, _FakeRun(stdout=stdout))
    with pytest.raises(MalformedDescriptorError):
        FFprobeAdapter().probe(str(clip))
