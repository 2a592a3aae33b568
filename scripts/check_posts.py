"""Validate a content directory: python -m scripts.check_posts [directory]"""

import logging
import sys

from folio.services.content_parser import ContentParser
from folio.services.posts_service import load_all
from folio.settings import settings

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    directory = argv[0] if argv else settings.CONTENT_DIR

    try:
        result = load_all(
            directory,
            parser=ContentParser(settings.DOCUMENT_SEPARATOR_PATTERN),
            workers=settings.LOAD_WORKERS,
        )
    except FileNotFoundError as e:
        logger.error(str(e))
        return 2

    for error in result.errors:
        where = error.source_path
        if error.index is not None:
            where = f"{where}[{error.index}]"
        logger.error(f"{where}: {error.reason}")

    warned = [post for post in result.posts if post.warnings]
    drafts = [post for post in result.posts if post.draft]
    print(
        f"{len(result.posts)} posts ({len(drafts)} drafts, "
        f"{len(warned)} with warnings), {len(result.errors)} errors"
    )
    return 1 if result.errors else 0


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    sys.exit(main())
