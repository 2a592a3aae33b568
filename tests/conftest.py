import textwrap
from pathlib import Path

import pytest

from folio.schemas.post import Post


class FakeRepo:
    """
    In-memory stand-in for FilesystemPostsRepo.
    Values that are exceptions are raised by read_text().
    """

    def __init__(self, files: dict, directory: str = "content/posts"):
        self.files = files
        self.directory = Path(directory)
        self.reads = []

    def list_post_files(self):
        paths = [self.directory / name for name in self.files]
        return sorted(paths, key=lambda p: p.name)

    def read_text(self, path):
        self.reads.append(Path(path).name)
        value = self.files[Path(path).name]
        if isinstance(value, Exception):
            raise value
        return textwrap.dedent(value).lstrip()


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    """

    def __init__(
        self,
        list_posts_return=None,
        get_post_return=None,
        tags_return=None,
        tag_posts_return=None,
        errors_return=None,
    ):
        self._list_posts_return = list_posts_return or []
        self._get_post_return = get_post_return
        self._tags_return = tags_return or []
        self._tag_posts_return = tag_posts_return
        self._errors_return = errors_return or []
        self.calls = []

    def list_posts(self, include_drafts: bool = False, order: str = "desc"):
        self.calls.append(("list_posts", include_drafts, order))
        return self._list_posts_return

    def get_post(self, slug: str):
        self.calls.append(("get_post", slug))
        return self._get_post_return

    def list_tags(self):
        return self._tags_return

    def posts_for_tag(self, tag: str):
        self.calls.append(("posts_for_tag", tag))
        return self._tag_posts_return

    def list_errors(self):
        return self._errors_return


def make_post(**overrides) -> Post:
    fields = {
        "title": "A Post",
        "slug": "a-post",
        "source_path": "content/posts/a-post.md",
    }
    fields.update(overrides)
    return Post(**fields)


class PostsDir:
    """A real content directory on disk for loader tests."""

    def __init__(self, path: Path):
        self.path = path

    def write(self, name: str, content: str, encoding: str = "utf-8") -> Path:
        target = self.path / name
        target.write_text(textwrap.dedent(content).lstrip(), encoding=encoding)
        return target


@pytest.fixture
def posts_dir(tmp_path):
    directory = tmp_path / "posts"
    directory.mkdir()
    return PostsDir(directory)
