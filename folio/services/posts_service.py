import datetime
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from folio.repos.posts_repo import FilesystemPostsRepo
from folio.schemas.blog import PostDetail, PostSummary, TagCount
from folio.schemas.post import Entry, LoadResult, ParseError, Post
from folio.services.content_parser import ContentParser, FrontMatterError
from folio.services.front_matter import (
    RECOGNIZED_KEYS,
    load_metadata,
    parse_date,
    parse_draft,
    parse_tags,
    parse_title,
)
from folio.settings import settings
from folio.utils import calculate_reading_time

logger = logging.getLogger(__name__)

SORT_ORDERS = ("desc", "asc")
REQUIRED_KEYS = ("title", "date", "draft")

_DATE_PREFIX = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:-|$)")
_SLUG_INVALID = re.compile(r"[^a-z0-9]+")


class PostsService:
    def __init__(self, repo, parser, workers: int | None = None):
        self.repo = repo
        self.parser = parser
        self.workers = workers

    def load(self) -> LoadResult:
        return load_repo(self.repo, parser=self.parser, workers=self.workers)

    def list_posts(
        self, include_drafts: bool = False, order: str = "desc"
    ) -> List[PostSummary]:
        posts = self.load().posts
        if not include_drafts:
            posts = filter_published(posts)
        return [to_summary(p) for p in sort_by_date(posts, order=order)]

    def get_post(self, slug: str) -> Optional[PostDetail]:
        post = next((p for p in self.load().posts if p.slug == slug), None)
        if not post:
            return None
        return to_detail(post)

    def list_tags(self) -> List[TagCount]:
        index = build_tag_index(filter_published(self.load().posts))
        return [TagCount(tag=tag, count=len(posts)) for tag, posts in index.items()]

    def posts_for_tag(self, tag: str) -> Optional[List[PostSummary]]:
        index = build_tag_index(filter_published(self.load().posts))
        wanted = tag.casefold()
        for name, posts in index.items():
            if name.casefold() == wanted:
                # Undated posts follow the dated ones so counts match list_tags
                undated = [p for p in posts if p.date is None]
                return [to_summary(p) for p in sort_by_date(posts) + undated]
        return None

    def list_errors(self) -> List[ParseError]:
        return self.load().errors


def load_all(
    directory, *, parser: ContentParser | None = None, workers: int | None = None
) -> LoadResult:
    """Load every post in a content directory.

    Malformed files and units come back as ParseError entries; only a
    missing directory raises.
    """
    return load_repo(
        FilesystemPostsRepo(directory),
        parser=parser or ContentParser(),
        workers=workers,
    )


def load_repo(repo, *, parser, workers: int | None = None) -> LoadResult:
    files = repo.list_post_files()
    workers = workers or settings.LOAD_WORKERS

    if workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            groups = list(
                pool.map(lambda path: load_file(repo, path, parser=parser), files)
            )
    else:
        groups = [load_file(repo, path, parser=parser) for path in files]

    result = LoadResult(entries=[entry for group in groups for entry in group])
    flag_duplicate_slugs(result.posts)
    logger.info(
        f"Loaded {len(result.posts)} posts with {len(result.errors)} errors "
        f"from {len(files)} files in {repo.directory}"
    )
    return result


def load_file(repo, path: Path, *, parser) -> List[Entry]:
    """Parse one file into its posts; never raises for bad content."""
    try:
        text = repo.read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read {path}: {e}")
        return [ParseError(source_path=str(path), reason=f"unreadable file: {e}")]

    units = parser.split_units(text)
    if not units:
        logger.warning(f"Skipped {path}: empty file")
        return [ParseError(source_path=str(path), reason="missing front matter")]

    multi = len(units) > 1
    return [
        parse_post_data(unit, path, i if multi else None, parser=parser)
        for i, unit in enumerate(units)
    ]


def parse_post_data(unit: str, path, index: int | None = None, *, parser) -> Entry:
    """Parse a single front-matter/body unit into a Post or a ParseError."""
    label = f"{path}[{index}]" if index is not None else str(path)
    try:
        fm, body = parser.split_front_matter(unit)
    except FrontMatterError as e:
        logger.warning(f"Skipped {label}: {e.reason}")
        return ParseError(source_path=str(path), index=index, reason=e.reason)

    try:
        metadata, warnings = load_metadata(fm)
    except ValueError as e:
        logger.warning(f"Skipped {label}: {e}")
        return ParseError(source_path=str(path), index=index, reason=str(e))

    try:
        stem = Path(path).stem
        slug = derive_slug(stem, index)
        file_date = filename_date(stem)

        for key in REQUIRED_KEYS:
            if key not in metadata:
                warnings.append(f"missing {key}")
        for key in metadata:
            if key not in RECOGNIZED_KEYS:
                warnings.append(f"unrecognized key: {key}")

        title = parse_title(metadata.get("title"))
        if not title:
            title = derive_title(slug)
            if "title" in metadata:
                warnings.append("empty title; derived from filename")

        date = parse_date(metadata.get("date"))
        date_source = "front_matter" if date else None
        if date is None:
            if metadata.get("date") is not None:
                warnings.append(f"unparsable date: {metadata['date']!r}")
            if file_date:
                date, date_source = file_date, "filename"
        elif (
            file_date
            and _days_apart(date, file_date) > settings.DATE_MISMATCH_TOLERANCE_DAYS
        ):
            warnings.append(
                f"date {date.date().isoformat()} does not match filename date "
                f"{file_date.date().isoformat()}"
            )

        draft = parse_draft(metadata.get("draft"))
        if draft is None:
            warnings.append(f"unrecognized draft value: {metadata['draft']!r}")
            draft = True

        tags, recovered = parse_tags(metadata.get("tags"))
        if recovered:
            warnings.append("tags recovered from malformed list")

        for warning in warnings:
            logger.warning(f"{label}: {warning}")

        return Post(
            title=title,
            date=date,
            date_source=date_source,
            draft=draft,
            tags=tags,
            slug=slug,
            body=body,
            source_path=str(path),
            index=index,
            reading_time=calculate_reading_time(body, settings.WORDS_PER_MINUTE),
            warnings=warnings,
        )
    except Exception as e:
        logger.warning(f"Failed to parse post {label}: {e}")
        return ParseError(
            source_path=str(path), index=index, reason=f"failed to parse: {e}"
        )


def filter_published(posts: Iterable[Post]) -> List[Post]:
    return [p for p in posts if not p.draft]


def sort_by_date(posts: Iterable[Post], order: str = "desc") -> List[Post]:
    """Stable sort by date. Undated posts are left out."""
    if order not in SORT_ORDERS:
        raise ValueError(f"order must be one of {SORT_ORDERS}, got {order!r}")
    dated = [p for p in posts if p.date is not None]
    # reverse=True keeps equal keys in input order
    return sorted(dated, key=lambda p: p.date, reverse=order == "desc")


def build_tag_index(posts: Iterable[Post]) -> Dict[str, List[Post]]:
    """Map each tag to its posts. Tags differing only in case share an entry."""
    index: Dict[str, List[Post]] = {}
    names: Dict[str, str] = {}
    for post in posts:
        for tag in post.tags:
            name = names.setdefault(tag.casefold(), tag)
            index.setdefault(name, [])
            if post not in index[name]:
                index[name].append(post)
    return index


def flag_duplicate_slugs(posts: Iterable[Post]) -> None:
    """Warn on every post whose slug was already taken earlier in the load."""
    seen: Dict[str, Post] = {}
    for post in posts:
        first = seen.setdefault(post.slug, post)
        if first is not post:
            warning = f"duplicate slug {post.slug!r}; first used by {first.source_path}"
            post.warnings.append(warning)
            logger.warning(f"{post.source_path}: {warning}")


def derive_slug(stem: str, index: int | None = None) -> str:
    slug = _SLUG_INVALID.sub("-", stem.lower()).strip("-") or "post"
    if index:
        # Normalized stems never contain "--", so this cannot match a file slug
        slug = f"{slug}--{index + 1}"
    return slug


def derive_title(slug: str) -> str:
    clean_slug = _DATE_PREFIX.sub("", slug) or slug
    clean_slug = clean_slug.replace("-", " ").replace("_", " ")
    return " ".join(clean_slug.split()).title()


def filename_date(stem: str) -> Optional[datetime.datetime]:
    match = _DATE_PREFIX.match(stem)
    if not match:
        return None
    try:
        year, month, day = (int(part) for part in match.groups())
        return datetime.datetime(year, month, day, tzinfo=datetime.timezone.utc)
    except ValueError:
        return None


def to_summary(post: Post) -> PostSummary:
    return PostSummary(**_summary_fields(post))


def to_detail(post: Post) -> PostDetail:
    return PostDetail(**_summary_fields(post), content=post.body)


def _summary_fields(post: Post) -> dict:
    return {
        "slug": post.slug,
        "title": post.title,
        "publishedAt": post.date.isoformat() if post.date else None,
        "tags": post.tags,
        "readingTime": post.reading_time,
        "draft": post.draft,
        "sourcePath": post.source_path,
    }


def _days_apart(a: datetime.datetime, b: datetime.datetime) -> int:
    return abs((a.date() - b.date()).days)
