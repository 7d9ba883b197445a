import pytest

from smartvideo.domain.policies.container import container_from_source, is_url, source_path


@pytest.mark.parametrize(
    "source, expected",
    [
        ("/videos/clip.mp4", "mp4"),
        ("/videos/CLIP.MOV", "mov"),
        ("/videos/archive.tar.mkv", "mkv"),
        ("/videos/clip", ""),
        ("/videos/clip.", ""),
        ("/videos/.hidden", ""),
        ("/videos.d/clip", ""),
        ("C:\\Users\\me\\Videos\\clip.WMV", "wmv"),
        ("https://cdn.example.com/a/b/clip.WEBM?sig=x.y", "webm"),
        ("https://cdn.example.com/stream", ""),
        ("blob:https://example.com/uuid", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_container_from_source(source, expected):
    assert container_from_source(source) == expected


def test_is_url():
    assert is_url("https://example.com/x.mp4")
    assert is_url("HTTP://example.com/x.mp4")
    assert not is_url("/videos/x.mp4")
    assert not is_url("C:\\videos\\x.mp4")


def test_source_path_strips_query():
    assert source_path("https://example.com/a/x.mp4?q=1#frag") == "/a/x.mp4"
    assert source_path("/local/x.mp4") == "/local/x.mp4"
