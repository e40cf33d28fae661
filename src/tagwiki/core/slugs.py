"""Mapping between page slugs and page files."""

from pathlib import Path

from tagwiki.core.errors import InvalidSlug

DEFAULT_EXTENSION = ".md"

# Characters that could address something outside the flat page directory
_FORBIDDEN_CHARS = ("/", "\\", "\x00")


class SlugCodec:
    """Convert between slugs and paths inside a single flat directory.

    ``to_path`` is a pure function of the slug: ``root / (slug + extension)``.
    ``to_slug`` is exact truncation of the extension, so files without it
    are not pages.
    """

    def __init__(self, root: Path, extension: str = DEFAULT_EXTENSION):
        if not extension:
            raise ValueError("Page extension must not be empty")
        self.root = Path(root)
        self.extension = extension

    def validate(self, slug: str) -> str:
        """Return ``slug`` unchanged or raise ``InvalidSlug``."""
        if not isinstance(slug, str) or not slug:
            raise InvalidSlug("Slug must be a non-empty string")
        if any(char in slug for char in _FORBIDDEN_CHARS):
            raise InvalidSlug(f"Slug contains a path separator: {slug!r}")
        # Dot-prefixed names are reserved for temporary files
        if slug.startswith("."):
            raise InvalidSlug(f"Slug must not start with a dot: {slug!r}")
        return slug

    def to_filename(self, slug: str) -> str:
        """Convert slug to filename."""
        return self.validate(slug) + self.extension

    def to_path(self, slug: str) -> Path:
        """Get full path for a page."""
        return self.root / self.to_filename(slug)

    def to_slug(self, filename: str) -> str | None:
        """Convert filename to slug, or None if it is not a page file."""
        if not filename.endswith(self.extension):
            return None
        slug = filename[: -len(self.extension)]
        if not slug or slug.startswith("."):
            return None
        return slug

    def is_page_file(self, filename: str) -> bool:
        return self.to_slug(filename) is not None
