"""Front matter decoding and field normalization.

YAML is tried first. When the block is not valid YAML (a stray quote in a tag
list is enough) it is decoded again one key at a time so a cosmetic error
only costs the affected key.
"""

import datetime
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import yaml
from frontmatter.default_handlers import YAMLHandler

logger = logging.getLogger(__name__)

RECOGNIZED_KEYS = ("title", "date", "draft", "tags")
NOT_A_MAPPING = "front matter is not a mapping"

_KEY_LINE = re.compile(r"^([A-Za-z_][\w-]*)\s*:(.*)$")
_DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
)
_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0", ""}
_TAG_STRIP = " \t\"'[]"

_handler = YAMLHandler()


def load_metadata(fm: str) -> Tuple[Dict[str, Any], List[str]]:
    """Decode a front matter block into a flat mapping plus warnings.

    Raises ValueError when nothing resembling a mapping can be recovered.
    """
    warnings: List[str] = []
    try:
        metadata = _handler.load(fm)
    except (yaml.YAMLError, ValueError) as e:
        # PyYAML raises a plain ValueError for impossible timestamps
        logger.debug(f"YAML front matter failed, decoding line by line: {e}")
        warnings.append("front matter is not valid YAML; decoded line by line")
        recovered = parse_lines(fm)
        if not recovered:
            raise ValueError(NOT_A_MAPPING)
        return recovered, warnings

    if metadata is None:
        return {}, warnings
    if isinstance(metadata, dict):
        return {str(k): v for k, v in metadata.items()}, warnings

    recovered = parse_lines(fm)
    if not recovered:
        raise ValueError(NOT_A_MAPPING)
    warnings.append("front matter is not a YAML mapping; decoded line by line")
    return recovered, warnings


def parse_lines(fm: str) -> Dict[str, Any]:
    """Best-effort flat `key: value` decoding.

    Indented lines and list items belong to the key above them. Each key's
    block is decoded as YAML on its own; if that fails the raw text is kept.
    """
    blocks: List[Tuple[str, List[str]]] = []
    for line in fm.splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        match = _KEY_LINE.match(line)
        if match and not line[0].isspace():
            blocks.append((match.group(1), [line]))
        elif blocks:
            blocks[-1][1].append(line)

    result: Dict[str, Any] = {}
    for key, lines in blocks:
        try:
            decoded = yaml.safe_load("\n".join(lines))
            value = decoded[key] if isinstance(decoded, dict) else None
        except (yaml.YAMLError, ValueError, KeyError, TypeError):
            first = _KEY_LINE.match(lines[0]).group(2)
            rest = [ln.strip() for ln in lines[1:]]
            value = " ".join([first.strip()] + rest).strip()
        result[key] = value
    return result


def parse_date(value) -> Optional[datetime.datetime]:
    """Coerce a front matter date to an aware datetime; naive means UTC."""
    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, datetime.date):
        parsed = datetime.datetime.combine(value, datetime.time())
    elif isinstance(value, str):
        parsed = _parse_date_string(value)
        if parsed is None:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def _parse_date_string(value: str) -> Optional[datetime.datetime]:
    text = value.strip().strip("\"'").strip()
    if not text:
        return None
    try:
        return datetime.datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_draft(value) -> Optional[bool]:
    """Return the draft flag, or None when the value is not recognizable."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().strip("\"'").lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    return None


def parse_tags(value) -> Tuple[List[str], bool]:
    """Return (tags, recovered).

    `recovered` is True when the value had to be salvaged from a string
    rather than read as a list.
    """
    if value is None:
        return [], False
    if isinstance(value, (list, tuple)):
        items = [str(item) for item in value if item is not None]
        recovered = False
    elif isinstance(value, str):
        items = value.strip().split(",")
        recovered = value.strip().startswith("[")
    else:
        items = [str(value)]
        recovered = False

    tags: List[str] = []
    for item in items:
        tag = item.strip(_TAG_STRIP)
        if tag and tag not in tags:
            tags.append(tag)
    return tags, recovered


def parse_title(value) -> Optional[str]:
    if value is None:
        return None
    title = str(value).strip()
    return title or None
