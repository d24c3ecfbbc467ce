"""
Query-string parsing for the legacy (Djatoka) surface.

Everything here is pure and returns a `Result`; nothing touches the network.
"""

from __future__ import annotations

import re
from typing import Optional, Pattern, Tuple, Union

from common.errors import InvalidParameter, Result, UnresolvableIdentifier
from common.types import LegacyRegion, LegacyRegionRequest


# Fedora 3 URLs: .../objects/<pid>/... or .../get/<pid>/...
DEFAULT_PID_PATTERN = r"^.*((objects)|(get))/([^/]*)/.*$"

_FRACTION = re.compile(r"\d*\.\d+")
_INT = re.compile(r"[+-]?\d+")


def compile_pid_pattern(pattern: Union[str, Pattern[str], None] = None) -> Pattern[str]:
    if pattern is None:
        return re.compile(DEFAULT_PID_PATTERN)
    if isinstance(pattern, str):
        return re.compile(pattern)
    return pattern


def resolve_identifier(url: Optional[str], pattern: Union[str, Pattern[str], None] = None) -> Result[str]:
    """
    Pull the image identifier (Fedora pid) out of a repository URL.

    A custom pattern may name its capture `pid`; otherwise the last group wins,
    which for the default pattern is the path segment after objects/ or get/.
    """
    if not url:
        return Result.failure(UnresolvableIdentifier("no URL given"))
    rx = compile_pid_pattern(pattern)
    m = rx.match(url)
    if m is None:
        return Result.failure(UnresolvableIdentifier(f"Unable to determine pid from {url!r}"))
    if "pid" in rx.groupindex:
        pid = m.group("pid")
    elif rx.groups:
        pid = m.group(rx.groups)
    else:
        pid = m.group(0)
    if not pid:
        return Result.failure(UnresolvableIdentifier(f"Empty pid in {url!r}"))
    return Result.success(pid)


def parse_level(raw: Optional[str]) -> Result[Optional[int]]:
    if raw is None or raw.strip() == "":
        return Result.success(None)
    s = raw.strip()
    if not _INT.fullmatch(s):
        return Result.failure(InvalidParameter(f"level must be an integer, got {raw!r}"))
    return Result.success(int(s))


def parse_region(raw: Optional[str]) -> Result[Optional[LegacyRegion]]:
    """
    Parse a Djatoka `y,x,h,w` region.

    No value, or a value without a comma, means the whole image (None).
    """
    if raw is None or "," not in raw:
        return Result.success(None)
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != 4:
        return Result.failure(InvalidParameter(f"region must be y,x,h,w, got {raw!r}"))
    if not all(_INT.fullmatch(p) for p in parts):
        return Result.failure(InvalidParameter(f"region values must be integers, got {raw!r}"))
    y, x, h, w = (int(p) for p in parts)
    return Result.success((y, x, h, w))


def is_fractional_scale(token: str) -> bool:
    """`0.5`, `.25`, `1.5` -> True; `200`, `200,100` -> False."""
    return bool(_FRACTION.fullmatch(token.strip()))


def parse_pixel_box(token: str) -> Result[Tuple[int, int]]:
    """`200` -> (200, 200); `300,200` -> (300, 200)."""
    parts = [p.strip() for p in token.split(",")]
    if len(parts) == 1:
        parts = parts * 2
    if len(parts) != 2 or not all(p.isdigit() and int(p) > 0 for p in parts):
        return Result.failure(
            InvalidParameter(f"scale must be a decimal fraction, N or W,H pixels, got {token!r}")
        )
    return Result.success((int(parts[0]), int(parts[1])))


def parse_region_request(
    level: Optional[str] = None,
    region: Optional[str] = None,
    scale: Optional[str] = None,
) -> Result[LegacyRegionRequest]:
    lvl = parse_level(level)
    if not lvl.ok:
        return Result.failure(lvl.error)
    reg = parse_region(region)
    if not reg.ok:
        return Result.failure(reg.error)
    scale = scale.strip() if scale else None
    return Result.success(
        LegacyRegionRequest(level=lvl.value, region=reg.value, scale=scale or None, region_given=bool(region))
    )
