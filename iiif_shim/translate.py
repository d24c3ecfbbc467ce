"""
Djatoka region/level/scale -> IIIF region/size.

Djatoka addresses a region as y,x,h,w at the resolution of a given level.
IIIF wants x,y,w,h in full-resolution pixels plus a size. Djatoka numbers
levels against the reversed scaleFactors array (largest first, 1 last), so
legacy level L maps to scaleFactors[count - (L + 1)]: level 0 picks the last
factor and the finest-level sentinel (-1) picks the first.

Two branches:
  A) no region + a scale: whole image, sized by fraction (pct:) or box (!w,h).
     No descriptor is needed.
  B) otherwise: fetch the descriptor, resolve the level to a scale factor,
     project the region and ask for pct:(100 / factor).
"""

from __future__ import annotations

from typing import Callable, Optional

from common.errors import LevelOutOfRange, Result
from common.types import LEVEL_FINEST, ImageDescriptor, LegacyRegionRequest, TargetRegionSpec
from iiif_shim.parsing import is_fractional_scale, parse_pixel_box


FULL = "full"

DescriptorFetcher = Callable[[str], Result[ImageDescriptor]]


def format_number(v: float) -> str:
    """100.0 -> '100', 12.5 -> '12.5', 100/3 -> '33.33333333'."""
    v = float(v)
    if v.is_integer():
        return str(int(v))
    return format(v, ".10g")


def translate_scale_only(scale: str) -> Result[TargetRegionSpec]:
    if is_fractional_scale(scale):
        pct = format_number(100.0 * float(scale))
        return Result.success(TargetRegionSpec(region=FULL, size=f"pct:{pct},{pct}"))
    box = parse_pixel_box(scale)
    if not box.ok:
        return Result.failure(box.error)
    w, h = box.value
    return Result.success(TargetRegionSpec(region=FULL, size=f"!{w},{h}"))


def resolve_scale_factor(descriptor: ImageDescriptor, level: Optional[int]) -> Result[int]:
    factors = descriptor.scale_factors
    count = len(factors)
    if level is None or level == LEVEL_FINEST:
        level = count - 1
    index = count - (level + 1)
    if index < 0 or index >= count:
        return Result.failure(
            LevelOutOfRange(f"level {level} outside 0..{count - 1} for {descriptor.identifier!r}")
        )
    return Result.success(factors[index])


def translate_level_region(descriptor: ImageDescriptor, request: LegacyRegionRequest) -> Result[TargetRegionSpec]:
    factor = resolve_scale_factor(descriptor, request.level)
    if not factor.ok:
        return Result.failure(factor.error)
    scale = factor.value

    region = FULL
    if request.region is not None:
        # x,y pass through untouched; only the extent is projected to full size.
        y, x, h, w = request.region
        region = f"{x},{y},{w * scale},{h * scale}"

    return Result.success(TargetRegionSpec(region=region, size=f"pct:{format_number(100.0 / scale)}"))


def translate(identifier: str, request: LegacyRegionRequest, fetch_descriptor: DescriptorFetcher) -> Result[TargetRegionSpec]:
    """Pick a branch; `fetch_descriptor` is only called for level/region addressing."""
    if request.is_scale_only:
        return translate_scale_only(request.scale)  # type: ignore[arg-type]

    descriptor = fetch_descriptor(identifier)
    if not descriptor.ok:
        return Result.failure(descriptor.error)
    return translate_level_region(descriptor.value, request)
