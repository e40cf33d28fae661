"""Storage abstraction for wiki pages."""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from tagwiki.core.errors import InvalidSlug, MalformedInput, PageNotFound, WriteFailure
from tagwiki.core.models import Page
from tagwiki.core.slugs import DEFAULT_EXTENSION, SlugCodec

logger = logging.getLogger(__name__)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# Read once: os.umask can only be queried by setting it
_UMASK = _current_umask()


class Storage(ABC):
    """Abstract base class for page storage."""

    @abstractmethod
    async def get_page(self, slug: str) -> Page:
        """Get a page by slug. Raises PageNotFound if it cannot be read."""
        ...

    @abstractmethod
    async def save_page(self, slug: str, body: str) -> Page:
        """Save a page, replacing any existing body. Creates if doesn't exist."""
        ...

    @abstractmethod
    async def list_pages(self) -> list[str]:
        """List all page slugs."""
        ...

    @abstractmethod
    async def page_exists(self, slug: str) -> bool:
        """Check if a page exists."""
        ...

    @abstractmethod
    async def read_bodies(self) -> list[tuple[str, str]]:
        """Read (slug, body) for every readable page."""
        ...


class FileStorage(Storage):
    """File-based storage implementation.

    Pages are stored as plain files in one flat directory.
    File naming: <slug><extension>, e.g. HomePage.md
    """

    def __init__(self, base_path: Path, extension: str = DEFAULT_EXTENSION):
        self.codec = SlugCodec(base_path, extension)
        self.base_path.mkdir(parents=True, exist_ok=True)

    @property
    def base_path(self) -> Path:
        return self.codec.root

    def _get_path(self, slug: str) -> Path:
        """Get full path for a page."""
        return self.codec.to_path(slug)

    def _read(self, path: Path) -> str:
        # newline="" keeps line endings exactly as written
        with path.open("r", encoding="utf-8", newline="") as f:
            return f.read()

    def _file_mode(self, path: Path) -> int:
        """Mode for a written page: keep an existing file's mode, else 0666 minus umask."""
        try:
            return path.stat().st_mode & 0o7777
        except OSError:
            return 0o666 & ~_UMASK

    def _write_atomic(self, path: Path, body: str) -> None:
        """Write body to a temp file next to path, then move it into place."""
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                # mkstemp always creates 0600
                os.fchmod(f.fileno(), self._file_mode(path))
                f.write(body)
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    async def get_page(self, slug: str) -> Page:
        """Get a page by slug."""
        try:
            path = self._get_path(slug)
        except InvalidSlug as exc:
            logger.warning("Rejected read of invalid slug %r", slug)
            raise PageNotFound(str(exc)) from exc

        try:
            body = self._read(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Page %r could not be read: %s", slug, exc)
            raise PageNotFound(f"Page {slug!r} does not exist") from exc

        return Page(slug=slug, body=body)

    async def save_page(self, slug: str, body: str) -> Page:
        """Save a page."""
        if body is None or not isinstance(body, str):
            raise MalformedInput("Page body must be a string")

        try:
            path = self._get_path(slug)
        except InvalidSlug:
            logger.warning("Rejected write to invalid slug %r", slug)
            raise

        try:
            self._write_atomic(path, body)
        except (OSError, UnicodeEncodeError) as exc:
            logger.warning("Could not write page %r: %s", slug, exc)
            raise WriteFailure(f"Could not write {path}") from exc

        logger.debug("Saved page %r (%d chars)", slug, len(body))
        return Page(slug=slug, body=body)

    def _iter_slugs(self) -> list[str]:
        try:
            entries = list(os.scandir(self.base_path))
        except OSError as exc:
            logger.warning("Could not list page directory %s: %s", self.base_path, exc)
            return []

        slugs = []
        for entry in entries:
            slug = self.codec.to_slug(entry.name)
            if slug is None:
                continue
            try:
                if not entry.is_file():
                    continue
            except OSError:
                continue
            slugs.append(slug)
        return sorted(slugs)

    async def list_pages(self) -> list[str]:
        """List all page slugs."""
        return self._iter_slugs()

    async def page_exists(self, slug: str) -> bool:
        """Check if a page exists."""
        try:
            return self._get_path(slug).is_file()
        except InvalidSlug:
            return False

    async def read_bodies(self) -> list[tuple[str, str]]:
        """Read every page, skipping those that vanish or cannot be decoded."""
        bodies = []
        for slug in self._iter_slugs():
            path = self.base_path / (slug + self.codec.extension)
            try:
                bodies.append((slug, self._read(path)))
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping unreadable page %r: %s", slug, exc)
        return bodies
