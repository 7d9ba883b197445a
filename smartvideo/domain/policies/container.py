# smartvideo/domain/policies/container.py
from __future__ import annotations

from pathlib import PurePosixPath, PureWindowsPath
from urllib.parse import urlsplit

# Sources that carry a URL path rather than a filesystem path
URL_SCHEMES = frozenset({"http", "https", "blob", "file", "ftp", "rtsp"})


def is_url(source: str) -> bool:
    scheme = urlsplit(source).scheme.lower()
    # single letters are Windows drive letters ("C:\\clip.mp4")
    return len(scheme) > 1 and scheme in URL_SCHEMES


def source_path(source: str) -> str:
    """The path portion of a source: URL path (no query/fragment) or the path itself."""
    if is_url(source):
        return urlsplit(source).path
    return source


def container_from_source(source: str | None) -> str:
    """
    Lowercase trailing extension of the source's last path segment,
    "" when there is none ("clip", "clip.", ".hidden").
    """
    if not source:
        return ""
    path = source_path(str(source))
    name = PureWindowsPath(path).name if "\\" in path else PurePosixPath(path).name
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem or not ext:
        return ""
    return ext.lower()
