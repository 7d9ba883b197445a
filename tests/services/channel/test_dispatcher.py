import json

import pytest

from smartvideo.domain.enums import ChannelCode
from smartvideo.domain.errors import InvalidArgumentError, NoVideoTrackError, UnsupportedOperationError
from smartvideo.services.channel.dispatcher import RequestDispatcher
from smartvideo.services.metadata.assembler import MetadataAssembler
from smartvideo.services.metadata.batch import BatchOrchestrator


@pytest.fixture()
def dispatcher(fake_probe):
    assembler = MetadataAssembler(fake_probe)
    return RequestDispatcher(assembler, BatchOrchestrator(assembler))


def test_operations(dispatcher):
    assert dispatcher.operations == ["getInfo", "getBatch"]


def test_get_info_success_payload(dispatcher):
    resp = dispatcher.dispatch("getInfo", {"path": "/videos/clip.mp4"})
    assert resp.ok
    payload = json.loads(resp.payload)
    assert payload["success"] is True
    assert payload["data"]["rotation"] == 90
    assert payload["data"]["container"] == "mp4"


def test_get_batch_success_payload(dispatcher):
    resp = dispatcher.dispatch("getBatch", {"paths": ["/v/a.mp4", "/v/b.webm"]})
    assert resp.ok
    assert [json.loads(p)["data"]["container"] for p in resp.payload] == ["mp4", "webm"]


@pytest.mark.parametrize(
    "method, arguments, message",
    [
        ("getInfo", None, "Arguments must be a map"),
        ("getInfo", ["/v/a.mp4"], "Arguments must be a map"),
        ("getInfo", {}, "Path is required"),
        ("getInfo", {"path": ""}, "Path is required"),
        ("getInfo", {"path": "   "}, "Path is required"),
        ("getInfo", {"path": 42}, "Path must be a string"),
        ("getBatch", {}, "Paths list is required"),
        ("getBatch", {"paths": []}, "Paths must be a non-empty list"),
        ("getBatch", {"paths": "/v/a.mp4"}, "Paths must be a non-empty list"),
        ("getBatch", {"paths": ["/v/a.mp4", ""]}, "Paths[1] must be a non-empty string"),
        ("getBatch", {"paths": ["/v/a.mp4", None]}, "Paths[1] must be a non-empty string"),
    ],
)
def test_invalid_arguments_never_probe(dispatcher, fake_probe, method, arguments, message):
    resp = dispatcher.dispatch(method, arguments)
    assert resp.status == "error"
    assert resp.code is ChannelCode.INVALID_ARGUMENT
    assert resp.message == message
    assert fake_probe.calls == []


def test_unknown_method_is_not_implemented(dispatcher, fake_probe):
    resp = dispatcher.dispatch("getThumbnail", {"path": "/v/a.mp4"})
    assert resp.status == "not_implemented"
    assert resp.code is ChannelCode.NOT_IMPLEMENTED
    assert fake_probe.calls == []


def test_prepare_raises_before_extraction(dispatcher, fake_probe):
    with pytest.raises(UnsupportedOperationError):
        dispatcher.prepare("nope", {})
    with pytest.raises(InvalidArgumentError):
        dispatcher.prepare("getBatch", {"paths": []})
    call = dispatcher.prepare("getInfo", {"path": "/v/a.mp4"})
    assert fake_probe.calls == []
    assert call().ok
    assert fake_probe.calls == ["/v/a.mp4"]


def test_extraction_failure_is_metadata_error(dispatcher, fake_probe):
    fake_probe.script["/v/song.mp3"] = NoVideoTrackError("No video track found", source="/v/song.mp3")

    single = dispatcher.dispatch("getInfo", {"path": "/v/song.mp3"})
    batch = dispatcher.dispatch("getBatch", {"paths": ["/v/a.mp4", "/v/song.mp3", "/v/c.mp4"]})

    for resp in (single, batch):
        assert resp.status == "error"
        assert resp.code is ChannelCode.METADATA_ERROR
        assert resp.message == "No video track found"
        assert resp.payload is None


def test_unexpected_reader_error_is_metadata_error(dispatcher, fake_probe):
    fake_probe.script["/v/odd.mp4"] = ValueError("bad native object")

    single = dispatcher.dispatch("getInfo", {"path": "/v/odd.mp4"})
    batch = dispatcher.dispatch("getBatch", {"paths": ["/v/odd.mp4", "/v/b.mp4"]})

    for resp in (single, batch):
        assert resp.code is ChannelCode.METADATA_ERROR
        assert "bad native object" in resp.message
    assert fake_probe.calls == ["/v/odd.mp4", "/v/odd.mp4"]
