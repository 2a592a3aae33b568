import logging
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


class FilesystemPostsRepo:
    def __init__(self, directory):
        self.directory = Path(directory)

    def list_post_files(self) -> List[Path]:
        """Markdown files directly inside the directory, sorted by name."""
        if not self.directory.is_dir():
            raise FileNotFoundError(f"Content directory not found: {self.directory}")
        files = [
            path
            for path in self.directory.iterdir()
            if path.is_file() and path.suffix == ".md"
        ]
        logger.debug(f"Found {len(files)} markdown files in {self.directory}")
        return sorted(files, key=lambda p: p.name)

    def read_text(self, path: Path) -> str:
        return Path(path).read_text(encoding="utf-8")
