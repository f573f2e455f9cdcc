"""
Default front-matter decoder.

Splits a markdown document into its YAML front-matter block and body. Never
raises: malformed or non-mapping front-matter yields empty metadata.
"""

import re
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

import yaml

from repodesk.logging import get_logger
from repodesk.types.collections import FrontMatter

logger = get_logger("core")

FrontMatterDecoder = Callable[[str], FrontMatter]

_FRONT_MATTER = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)


def decode_front_matter(raw: str) -> FrontMatter:
    """
    Decode YAML front-matter delimited by '---' lines.

    Args:
        raw: Full document text

    Returns:
        FrontMatter with metadata, body and the raw YAML block
    """
    match = _FRONT_MATTER.match(raw)
    if match is None:
        return FrontMatter(metadata={}, body=raw, raw_block="")

    raw_block = match.group(1) or ""
    body = raw[match.end():]
    try:
        metadata = yaml.safe_load(raw_block)
    except yaml.YAMLError as e:
        logger.debug("Ignoring malformed front-matter: %s", e)
        return FrontMatter(metadata={}, body=body, raw_block=raw_block)

    if not isinstance(metadata, dict):
        metadata = {}
    return FrontMatter(metadata=metadata, body=body, raw_block=raw_block)


def to_json_compatible(value: Any) -> Any:
    """
    Convert decoded YAML values into ones json.dumps accepts.

    Dates and datetimes become ISO 8601 strings; sets become lists. Applied
    recursively through mappings and sequences.
    """
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {
            key.isoformat() if isinstance(key, (date, datetime)) else key: to_json_compatible(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple, set)):
        return [to_json_compatible(item) for item in value]
    return value
