"""Normalisation of the irregular ISO-8601 timestamps providers emit."""

import re
from datetime import datetime

from dateutil import parser as date_parser

from domain.base.exceptions import DecodingError

NANOS_TO_MILLIS_PATTERN = re.compile(r"^(.*\.[0-9]{3})[0-9]{3,}Z?$")

TZ_PATTERN = re.compile(r"^(.*T[0-9]{2}:[0-9]{2}(?::[0-9]{2}(?:\.[0-9]+)?)?)[+-][0-9]{2}:?[0-9]{2}Z?$")

SECOND_PATTERN = re.compile(r"^.*[0-2][0-9]:00$")


def trim_nanos_to_millis(value: str) -> str:
    """Cut six or more fractional digits down to milliseconds, marked UTC."""
    match = NANOS_TO_MILLIS_PATTERN.match(value)
    if match:
        return match.group(1) + "Z"
    return value


def trim_tz(value: str) -> str:
    """Collapse a numeric ``±HH:MM``/``±HHMM`` offset to a literal ``Z``."""
    match = TZ_PATTERN.match(value)
    if match:
        value = match.group(1) + "Z"
    if len(value) == 25 and SECOND_PATTERN.match(value):
        value = value[:-6] + "Z"
    return value


def normalize_timestamp(value: str) -> str:
    """Apply both rewrites, offset first; canonical timestamps come back unchanged."""
    return trim_nanos_to_millis(trim_tz(value.strip()))


def parse_iso8601(value: str, element: str = "timestamp") -> datetime:
    """Normalise and parse a provider timestamp."""
    normalized = normalize_timestamp(value)
    try:
        return date_parser.isoparse(normalized)
    except (ValueError, OverflowError) as e:
        raise DecodingError(
            f"Invalid timestamp in <{element}>: {e}", element=element, value=value
        ) from e
