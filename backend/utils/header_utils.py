import logging
import re
from typing import List, Optional

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Everything except letters, digits, underscore and whitespace is dropped
_PUNCTUATION_RE = re.compile(r"[^a-zA-Z0-9_\s]")
# A separator directly followed by a word character starts the next camelCase hump
_SEPARATOR_RE = re.compile(r"[_\s]\w")
_STRIP_SEPARATORS_RE = re.compile(r"[_ ]")


def normalize_header(header: Optional[str]) -> str:
    """Convert a raw header label into a camelCase key.

    Examples:
      from_content -> fromContent
      To Content   -> toContent
      "Types"      -> types
    """
    if not header:
        return ""

    normalized = _PUNCTUATION_RE.sub("", header.replace('"', "")).strip().lower()
    return _SEPARATOR_RE.sub(lambda m: _STRIP_SEPARATORS_RE.sub("", m.group(0).upper()), normalized)


def normalize_headers(raw_headers: List[str]) -> List[str]:
    """Normalize a header row, keeping column positions.

    Colliding keys are kept positionally (the last column wins when a record
    is built); each collision is logged.
    """
    keys = [normalize_header(h) for h in raw_headers]
    seen = set()
    for raw, key in zip(raw_headers, keys):
        if key in seen:
            logger.warning(f"Header {raw!r} normalizes to duplicate key {key!r}; last column wins")
        seen.add(key)
    return keys
