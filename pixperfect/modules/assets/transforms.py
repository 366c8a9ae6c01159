"""Image transforms applied before an asset is persisted.

Transforms are pure: they take encoded image bytes and return new PNG bytes
without touching any store. Parsing of caller input happens in
:func:`parse_rotation` and :func:`parse_mirror` so that invalid parameters are
rejected before the upload is even read.

Mirror axes keep the names the public API has always used:

* ``horizontal`` flips the image top-to-bottom
* ``vertical`` flips the image left-to-right
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from typing import Union

from PIL import Image, UnidentifiedImageError

from .exceptions import InvalidParameterError, UnprocessableAssetError

MAX_ROTATION_DEGREES = 360

# Modes the PNG encoder writes without conversion.
_PNG_MODES = {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}


class MirrorAxis(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


_MIRROR_TRANSPOSE = {
    MirrorAxis.HORIZONTAL: Image.Transpose.FLIP_TOP_BOTTOM,
    MirrorAxis.VERTICAL: Image.Transpose.FLIP_LEFT_RIGHT,
}


@dataclass(frozen=True, slots=True)
class Rotate:
    degrees: int

    @property
    def verb(self) -> str:
        return "rotated"


@dataclass(frozen=True, slots=True)
class Mirror:
    axis: MirrorAxis

    @property
    def verb(self) -> str:
        return "flipped"


TransformOperation = Union[Rotate, Mirror]


def parse_rotation(raw: str | int | None) -> Rotate:
    """Build a rotation from caller input, accepting whole degrees in [-360, 360]."""
    if isinstance(raw, bool):
        raise InvalidParameterError("Degrees must be an integer")
    if isinstance(raw, int):
        degrees = raw
    else:
        text = (raw or "").strip()
        try:
            degrees = int(text)
        except ValueError as exc:
            raise InvalidParameterError("Degrees must be an integer") from exc
    if abs(degrees) > MAX_ROTATION_DEGREES:
        raise InvalidParameterError(
            f"Degrees must be between -{MAX_ROTATION_DEGREES} and {MAX_ROTATION_DEGREES}"
        )
    return Rotate(degrees)


def parse_mirror(raw: str | None) -> Mirror:
    try:
        return Mirror(MirrorAxis((raw or "").strip().lower()))
    except ValueError as exc:
        raise InvalidParameterError("Direction must be 'horizontal' or 'vertical'") from exc


def _decode(data: bytes) -> Image.Image:
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise UnprocessableAssetError("Uploaded file is not a supported image") from exc
    return image


def _encode_png(image: Image.Image) -> bytes:
    if image.mode not in _PNG_MODES:
        image = image.convert("RGBA")
    buffer = BytesIO()
    try:
        image.save(buffer, format="PNG")
    except (OSError, ValueError) as exc:
        raise UnprocessableAssetError("Failed to encode transformed image") from exc
    return buffer.getvalue()


def apply_transform(operation: TransformOperation, data: bytes) -> bytes:
    """Apply ``operation`` to encoded image bytes and return PNG bytes."""
    if not isinstance(operation, (Rotate, Mirror)):
        raise InvalidParameterError(f"Unsupported transform: {operation!r}")
    image = _decode(data)
    try:
        if isinstance(operation, Rotate):
            # Pillow rotates counter-clockwise; callers expect clockwise.
            result = image.rotate(-operation.degrees, expand=True)
        else:
            result = image.transpose(_MIRROR_TRANSPOSE[operation.axis])
    except (OSError, ValueError) as exc:
        raise UnprocessableAssetError("Failed to transform image") from exc
    return _encode_png(result)


__all__ = [
    "MAX_ROTATION_DEGREES",
    "Mirror",
    "MirrorAxis",
    "Rotate",
    "TransformOperation",
    "apply_transform",
    "parse_mirror",
    "parse_rotation",
]
