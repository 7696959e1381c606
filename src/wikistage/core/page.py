"""Plain-text page storage.

Storage layout:
    data/
    ├── FrontPage.txt
    └── SomeOtherPage.txt

One file per page, named after the page title. File contents are the raw
page body with no metadata.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from wikistage.core.paths import is_valid_title
from wikistage.core.types import Title

logger = logging.getLogger(__name__)

PAGE_SUFFIX = ".txt"


@dataclass
class Page:
    """A wiki page: title plus raw body bytes."""

    title: Title
    body: bytes = b""

    @property
    def text(self) -> str:
        """Body decoded as UTF-8 for display."""
        return self.body.decode("utf-8", errors="replace")


class PageStore:
    """Loads and saves pages as files in a single data directory.

    There is no locking: concurrent saves to the same title are
    last-writer-wins.
    """

    def __init__(self, data_dir: Path) -> None:
        """Initialize store.

        Args:
            data_dir: Directory holding one <title>.txt file per page
        """
        self._data_dir = data_dir

    @property
    def data_dir(self) -> Path:
        """Directory holding page files."""
        return self._data_dir

    def path_for(self, title: Title) -> Path:
        """Return the file path used to store a page."""
        return self._data_dir / f"{title}{PAGE_SUFFIX}"

    def load(self, title: Title) -> Page:
        """Load a page from disk.

        Args:
            title: Validated page title

        Returns:
            Page with the stored body

        Raises:
            OSError: If the page file is missing or unreadable
        """
        path = self.path_for(title)
        body = path.read_bytes()
        logger.debug(f"Loaded page {title} ({len(body)} bytes)")
        return Page(title=title, body=body)

    def save(self, page: Page) -> None:
        """Write a page to disk, replacing any previous body.

        New files are created with owner-only read/write permissions.

        Raises:
            OSError: If the file cannot be written
        """
        path = self.path_for(page.title)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as f:
            f.write(page.body)
        logger.debug(f"Saved page {page.title} ({len(page.body)} bytes)")

    def titles(self) -> list[Title]:
        """List titles of stored pages, sorted.

        Files whose names are not valid titles are skipped.
        """
        if not self._data_dir.is_dir():
            return []
        titles = [
            Title(path.stem)
            for path in self._data_dir.glob(f"*{PAGE_SUFFIX}")
            if path.is_file() and is_valid_title(path.stem)
        ]
        return sorted(titles)
