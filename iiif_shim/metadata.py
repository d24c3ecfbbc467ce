from __future__ import annotations

from typing import Any
from urllib.parse import quote_plus

from common.errors import Result
from common.types import ImageDescriptor, LegacyDescriptor


# Djatoka clients want an image path but never open it.
FAKE_IMAGEFILE_PREFIX = "/this/is/a/fake/path/to/spoof/djatoka/"


def to_legacy_descriptor(descriptor: ImageDescriptor) -> LegacyDescriptor:
    """Map an IIIF descriptor onto the Djatoka metadata shape (single compositing layer)."""
    levels = descriptor.level_count
    return LegacyDescriptor(
        identifier=descriptor.identifier,
        imagefile=FAKE_IMAGEFILE_PREFIX + quote_plus(descriptor.identifier),
        width=descriptor.width,
        height=descriptor.height,
        dwt_levels=levels,
        levels=levels,
        compositing_layer_count=1,
    )


def legacy_metadata(info_doc: Any) -> Result[LegacyDescriptor]:
    parsed = ImageDescriptor.from_info_json(info_doc)
    if not parsed.ok:
        return Result.failure(parsed.error)
    return Result.success(to_legacy_descriptor(parsed.value))
