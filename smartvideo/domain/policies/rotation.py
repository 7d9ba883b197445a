# smartvideo/domain/policies/rotation.py
from __future__ import annotations

import math

from smartvideo.domain.entities.descriptor import AffineTransform

# Inclusive (low, high, snapped) bands, degrees in [-180, 180).
# Authoring tools rarely write exact quadrant matrices, hence the +/-5 slack.
_BANDS: tuple[tuple[float, float, int], ...] = (
    (85.0, 95.0, 90),
    (175.0, 185.0, 180),
    (-185.0, -175.0, 180),
    (-95.0, -85.0, 270),
)


def normalize_angle(degrees: float) -> int:
    """
    Snap an arbitrary angle (degrees, counter-clockwise from +x as produced by
    atan2) to one of 0, 90, 180, 270. Out-of-band and non-finite input is 0.
    """
    try:
        deg = float(degrees)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(deg):
        return 0

    wrapped = ((deg + 180.0) % 360.0) - 180.0
    for low, high, snapped in _BANDS:
        if low <= wrapped <= high:
            return snapped
    return 0


def normalize_rotation(transform: AffineTransform) -> int:
    """Display rotation of a track transform: atan2(b, a), snapped to a quadrant."""
    try:
        angle = math.degrees(math.atan2(float(transform.b), float(transform.a)))
    except (TypeError, ValueError, AttributeError):
        return 0
    return normalize_angle(angle)


def transform_for_rotation(degrees_clockwise: float) -> AffineTransform:
    """Build the rotation matrix a player applies for a clockwise display rotation."""
    rad = math.radians(degrees_clockwise)
    cos, sin = math.cos(rad), math.sin(rad)
    return AffineTransform(a=cos, b=sin, c=-sin, d=cos)
