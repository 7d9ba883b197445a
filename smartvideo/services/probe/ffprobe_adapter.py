# smartvideo/services/probe/ffprobe_adapter.py
from __future__ import annotations

import json
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlsplit

from smartvideo.common.logging import get_logger
from smartvideo.common.probe.ffprobe_helpers import build_ffprobe_cmd, parse_ffprobe
from smartvideo.common.settings import get_settings
from smartvideo.domain.entities.descriptor import MediaTrackDescriptor
from smartvideo.domain.errors import (
    MalformedDescriptorError,
    ProbeTimeoutError,
    SourceUnreadableError,
)
from smartvideo.domain.policies.container import is_url
from smartvideo.domain.ports.probe import MediaProbePort

logger = get_logger(__name__)


class FFprobeAdapter(MediaProbePort):
    """
    Infrastructure adapter implementing MediaProbePort using `ffprobe`.
    Safe for use from ThreadManager (I/O-bound).

    Local files are probed without an upper bound unless ffprobe.timeout_sec
    is configured. Remote URLs load passively, so they are always bounded by
    remote.load_timeout_sec.
    """

    def __init__(
        self,
        ffprobe_bin: Optional[str] = None,
        timeout_sec: Optional[int] = None,
        remote_timeout_sec: Optional[int] = None,
        allowed_schemes: Optional[List[str]] = None,
    ):
        cfg = get_settings()
        candidate = ffprobe_bin or cfg.ffprobe.bin
        # try to resolve absolute path for nicer errors
        resolved = shutil.which(candidate)
        if not resolved:
            raise SourceUnreadableError(
                f"ffprobe not found ({candidate!r}); set FFPROBE__BIN or install ffmpeg."
            )

        self.ffprobe_bin = resolved
        self.log_level = cfg.ffprobe.log_level
        self.timeout_sec = timeout_sec if timeout_sec is not None else cfg.ffprobe.timeout_sec
        self.remote_timeout_sec = int(remote_timeout_sec or cfg.remote.load_timeout_sec)
        self.allowed_schemes = {s.lower() for s in (allowed_schemes or cfg.remote.allowed_schemes)}

    # ---- Port API -------------------------------------------------------------
    def probe(self, source: str) -> MediaTrackDescriptor:
        if not source:
            raise SourceUnreadableError("No source provided to probe().")

        remote = is_url(source)
        if remote:
            scheme = urlsplit(source).scheme.lower()
            if scheme not in self.allowed_schemes:
                raise SourceUnreadableError(
                    f"Unsupported URL scheme {scheme!r} (allowed: {', '.join(sorted(self.allowed_schemes))})",
                    source=source,
                )
            timeout = self.remote_timeout_sec
        else:
            if not Path(source).is_file():
                raise SourceUnreadableError(f"File not found: {source}", source=source)
            timeout = self.timeout_sec

        cmd = build_ffprobe_cmd(source, ffprobe_bin=self.ffprobe_bin, log_level=self.log_level)
        logger.debug("ffprobe cmd: %s", " ".join(shlex.quote(p) for p in cmd))

        try:
            # subprocess.run kills and reaps the child on timeout
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                check=False,  # we handle rc manually to attach stderr
            )
        except subprocess.TimeoutExpired as e:
            raise ProbeTimeoutError(
                f"Metadata extraction timed out after {timeout}s", source=source
            ) from e
        except OSError as e:
            raise SourceUnreadableError(f"Failed to execute ffprobe: {e}", source=source) from e

        if proc.returncode != 0:
            stderr = (proc.stderr or "").strip()
            raise SourceUnreadableError(
                f"ffprobe could not read {source} (rc={proc.returncode}): {stderr or 'no details'}",
                source=source,
            )

        try:
            data = json.loads(proc.stdout or "{}")
        except json.JSONDecodeError as e:
            raise MalformedDescriptorError("ffprobe produced invalid JSON", source=source) from e

        return parse_ffprobe(data, source)
