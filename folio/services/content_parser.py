import logging
import re
from typing import List, Tuple

from frontmatter.default_handlers import YAMLHandler

from folio.settings import settings

logger = logging.getLogger(__name__)

MISSING_FRONT_MATTER = "missing front matter"
UNTERMINATED_FRONT_MATTER = "unterminated front matter"


class FrontMatterError(ValueError):
    """A unit whose front matter block cannot be located."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ContentParser:
    """Splits raw file text into front-matter/body units.

    Some files carry several documents glued together with a separator token.
    Each piece between separators is handled as an independent unit.
    """

    def __init__(self, separator_pattern: str | None = None):
        self.separator = re.compile(
            separator_pattern or settings.DOCUMENT_SEPARATOR_PATTERN
        )
        self.handler = YAMLHandler()

    def split_units(self, text: str) -> List[str]:
        """Return the non-blank units of a file, in file order."""
        text = text.lstrip("\ufeff")
        # Text captured by groups in the pattern never becomes a unit
        parts, start = [], 0
        for match in self.separator.finditer(text):
            parts.append(text[start : match.start()])
            start = match.end()
        parts.append(text[start:])
        units = [part for part in parts if part.strip()]
        if len(units) > 1:
            logger.debug(f"Split text into {len(units)} units")
        return units

    def split_front_matter(self, unit: str) -> Tuple[str, str]:
        """Return (front matter text, markdown body) for one unit."""
        text = unit.lstrip("\ufeff").lstrip()
        if not self.handler.detect(text):
            raise FrontMatterError(MISSING_FRONT_MATTER)
        try:
            fm, content = self.handler.split(text)
        except ValueError:
            # Only the opening delimiter was found
            raise FrontMatterError(UNTERMINATED_FRONT_MATTER)
        return fm, content.lstrip("\n")
