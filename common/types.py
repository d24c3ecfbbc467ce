from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from common.errors import MalformedMetadata, Result


# Legacy "give me the finest level you have" marker.
LEVEL_FINEST = -1

# (y, x, h, w) in legacy axis order, level-resolution coordinates.
LegacyRegion = Tuple[int, int, int, int]


def _positive_int(v: Any) -> Optional[int]:
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v if v > 0 else None
    if isinstance(v, float) and v.is_integer():
        return int(v) if v > 0 else None
    if isinstance(v, str) and v.strip().isdigit():
        n = int(v.strip())
        return n if n > 0 else None
    return None


@dataclass(frozen=True, slots=True)
class ImageDescriptor:
    """
    Subset of an IIIF Image API `info.json` that the shim relies on.

    Attributes:
        identifier: the document's `@id` (or `id` for API 3 documents).
        width, height: full-resolution pixel dimensions.
        scale_factors: from `tiles[0].scaleFactors`, coarsest first as served,
            typically ending in 1.
    """
    identifier: str
    width: int
    height: int
    scale_factors: Tuple[int, ...]

    @property
    def level_count(self) -> int:
        # Legacy level count is one less than the number of factors.
        return len(self.scale_factors) - 1

    @classmethod
    def from_info_json(cls, doc: Any) -> Result["ImageDescriptor"]:
        if not isinstance(doc, dict):
            return Result.failure(MalformedMetadata("descriptor is not a JSON object"))

        identifier = doc.get("@id", doc.get("id"))
        if not isinstance(identifier, str) or not identifier:
            return Result.failure(MalformedMetadata("descriptor has no @id"))

        width = _positive_int(doc.get("width"))
        height = _positive_int(doc.get("height"))
        if width is None or height is None:
            return Result.failure(
                MalformedMetadata(f"descriptor width/height missing or non-numeric for {identifier!r}")
            )

        tiles = doc.get("tiles")
        if not isinstance(tiles, list) or not tiles or not isinstance(tiles[0], dict):
            return Result.failure(MalformedMetadata(f"descriptor has no tiles entry for {identifier!r}"))
        raw = tiles[0].get("scaleFactors")
        if not isinstance(raw, list) or not raw:
            return Result.failure(MalformedMetadata(f"descriptor has no scaleFactors for {identifier!r}"))
        factors = [_positive_int(f) for f in raw]
        if any(f is None for f in factors):
            return Result.failure(MalformedMetadata(f"scaleFactors must be positive integers: {raw!r}"))

        return Result.success(
            cls(identifier=identifier, width=width, height=height, scale_factors=tuple(factors))  # type: ignore[arg-type]
        )


@dataclass(frozen=True, slots=True)
class LegacyDescriptor:
    """Djatoka-shaped metadata; every number is rendered as a decimal string on the wire."""
    identifier: str
    imagefile: str
    width: int
    height: int
    dwt_levels: int
    levels: int
    compositing_layer_count: int = 1

    def to_json(self) -> Dict[str, str]:
        return {
            "identifier": self.identifier,
            "imagefile": self.imagefile,
            "width": str(self.width),
            "height": str(self.height),
            "dwtLevels": str(self.dwt_levels),
            "levels": str(self.levels),
            "compositingLayerCount": str(self.compositing_layer_count),
        }


@dataclass(frozen=True, slots=True)
class LegacyRegionRequest:
    level: Optional[int] = None
    region: Optional[LegacyRegion] = None
    scale: Optional[str] = None
    # A region value was sent, even one without a comma (whole image).
    region_given: bool = False

    @property
    def is_scale_only(self) -> bool:
        return self.region is None and not self.region_given and bool(self.scale)


@dataclass(frozen=True, slots=True)
class TargetRegionSpec:
    """IIIF region/size pair plus the fixed rotation and quality.format tail."""
    region: str
    size: str
    rotation: str = "0"
    quality: str = "default"
    fmt: str = "jpg"

    def path(self) -> str:
        return f"{self.region}/{self.size}/{self.rotation}/{self.quality}.{self.fmt}"
