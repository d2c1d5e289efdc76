"""
Form field parsing for the image routes.

Every parser takes the raw form value (a string or None) and degrades
malformed input to a documented default. Only the generation prompt is
mandatory and raises when missing.
"""
import math
import re
from typing import Optional

from core.errors import MissingPrompt

SUPPORTED_FORMATS = ("jpeg", "png", "webp", "avif")
DEFAULT_FORMAT = "jpeg"
DEFAULT_JPEG_QUALITY = 80

QUALITY_MIN, QUALITY_MAX = 40, 95
STEPS_MIN, STEPS_MAX = 10, 50
GUIDANCE_MIN, GUIDANCE_MAX = 1.0, 20.0

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def _clamp(value, lower, upper):
    return min(max(value, lower), upper)


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse the leading integer of a form value ("12px" -> 12, "3.7" -> 3)."""
    if not isinstance(value, str):
        return None
    match = _INT_PREFIX.match(value)
    if not match:
        return None
    return int(match.group(1))


def parse_float(value: Optional[str]) -> Optional[float]:
    if not isinstance(value, str):
        return None
    match = _FLOAT_PREFIX.match(value)
    if not match:
        return None
    number = float(match.group(1))
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def parse_format(value: Optional[str]) -> str:
    if not isinstance(value, str):
        return DEFAULT_FORMAT
    normalized = value.strip().lower()
    if normalized in SUPPORTED_FORMATS:
        return normalized
    return DEFAULT_FORMAT


def parse_quality(value: Optional[str], fmt: str) -> Optional[int]:
    """
    Parse the encoder quality for ``fmt``.

    Unparsable input yields 80 for JPEG and None (backend default) otherwise.
    Parsed values are clamped into [40, 95].
    """
    quality = parse_int(value)
    if quality is None:
        return DEFAULT_JPEG_QUALITY if fmt == "jpeg" else None
    return _clamp(quality, QUALITY_MIN, QUALITY_MAX)


def parse_dimension(value: Optional[str]) -> Optional[int]:
    dimension = parse_int(value)
    if dimension is None or dimension <= 0:
        return None
    return dimension


def parse_steps(value: Optional[str]) -> Optional[int]:
    steps = parse_int(value)
    if steps is None:
        return None
    return _clamp(steps, STEPS_MIN, STEPS_MAX)


def parse_guidance(value: Optional[str]) -> Optional[float]:
    guidance = parse_float(value)
    if guidance is None:
        return None
    return _clamp(guidance, GUIDANCE_MIN, GUIDANCE_MAX)


def parse_seed(value: Optional[str]) -> Optional[int]:
    return parse_int(value)


def parse_prompt(value: Optional[str]) -> str:
    if not isinstance(value, str) or not value.strip():
        raise MissingPrompt()
    return value


def parse_negative_prompt(value: Optional[str]) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    return value


def parse_model(value: Optional[str], default: str) -> str:
    if not isinstance(value, str) or not value.strip():
        return default
    return value.strip()
