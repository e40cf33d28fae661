"""Tag derivation over page bodies.

Tags are never stored. A tag is any run of word characters directly after a
``#`` in a page body, and every query recomputes them from the current files.
"""

import logging
import re
from collections import Counter
from typing import Literal

from tagwiki.core.models import TagPages
from tagwiki.core.storage import Storage

logger = logging.getLogger(__name__)

# Pattern for tags: #word
TAG_PATTERN = re.compile(r"#(\w+)")

# Queries that can be answered by a prefix lookup on extracted tags
WORD_PATTERN = re.compile(r"\w+")

MatchMode = Literal["substring", "token"]
MATCH_MODES: tuple[str, ...] = ("substring", "token")


def extract_tags(body: str) -> list[str]:
    """Return every tag in ``body`` in order of appearance, without the ``#``.

    A body without markers gives an empty list.
    """
    return TAG_PATTERN.findall(body)


def body_has_tag(body: str, tag: str, mode: MatchMode = "substring") -> bool:
    """Check whether ``body`` matches a tag query.

    ``substring`` looks for the literal text ``"#" + tag``, so ``foo`` also
    matches ``#foobar``. ``token`` requires ``tag`` to be one of the
    extracted tags.
    """
    if mode == "token":
        return tag in extract_tags(body)
    return f"#{tag}" in body


def _check_mode(mode: str) -> None:
    if mode not in MATCH_MODES:
        raise ValueError(f"Unknown tag match mode: {mode!r}")


class TagIndex:
    """Stateless tag queries over a page store.

    Every call lists the store and reads each page body.
    """

    def __init__(self, storage: Storage, match_mode: MatchMode = "substring"):
        _check_mode(match_mode)
        self.storage = storage
        self.match_mode = match_mode

    async def all_tags(self) -> list[str]:
        """All distinct tags across the corpus."""
        tags: set[str] = set()
        for _, body in await self.storage.read_bodies():
            tags.update(extract_tags(body))
        return sorted(tags)

    async def find_pages_by_tag(self, tag: str) -> TagPages:
        """Slugs of pages whose body matches ``tag``."""
        pages = [
            slug
            for slug, body in await self.storage.read_bodies()
            if body_has_tag(body, tag, self.match_mode)
        ]
        return TagPages(tag=tag, pages=pages)

    async def tag_counts(self) -> dict[str, int]:
        """Number of pages carrying each tag."""
        counts: Counter[str] = Counter()
        for _, body in await self.storage.read_bodies():
            counts.update(set(extract_tags(body)))
        return dict(sorted(counts.items()))

    async def page_saved(self, slug: str, body: str) -> None:
        """Hook called after a successful write. Nothing to do without a cache."""


class IncrementalTagIndex(TagIndex):
    """In-memory inverted index (tag -> slugs), kept current by ``page_saved``.

    Only writes made through this process are seen; call ``rebuild`` to pick
    up changes made directly on disk. Nothing is persisted.
    """

    def __init__(self, storage: Storage, match_mode: MatchMode = "substring"):
        super().__init__(storage, match_mode)
        self._tags_by_slug: dict[str, set[str]] = {}
        self._slugs_by_tag: dict[str, set[str]] = {}
        self._built = False

    @property
    def built(self) -> bool:
        return self._built

    async def rebuild(self) -> None:
        """Rebuild the index from the current store contents."""
        self._tags_by_slug.clear()
        self._slugs_by_tag.clear()
        bodies = await self.storage.read_bodies()
        for slug, body in bodies:
            self._index(slug, body)
        self._built = True
        logger.info(
            "Tag index rebuilt: %d pages, %d tags",
            len(self._tags_by_slug),
            len(self._slugs_by_tag),
        )

    def _index(self, slug: str, body: str) -> None:
        for tag in self._tags_by_slug.pop(slug, set()):
            slugs = self._slugs_by_tag.get(tag)
            if slugs is None:
                continue
            slugs.discard(slug)
            if not slugs:
                del self._slugs_by_tag[tag]

        tags = set(extract_tags(body))
        self._tags_by_slug[slug] = tags
        for tag in tags:
            self._slugs_by_tag.setdefault(tag, set()).add(slug)

    async def _ensure_built(self) -> None:
        if not self._built:
            await self.rebuild()

    async def page_saved(self, slug: str, body: str) -> None:
        # Before the first rebuild the write is picked up from disk
        if self._built:
            self._index(slug, body)

    async def all_tags(self) -> list[str]:
        await self._ensure_built()
        return sorted(self._slugs_by_tag)

    async def tag_counts(self) -> dict[str, int]:
        await self._ensure_built()
        return {tag: len(slugs) for tag, slugs in sorted(self._slugs_by_tag.items())}

    async def find_pages_by_tag(self, tag: str) -> TagPages:
        await self._ensure_built()
        if self.match_mode == "token":
            pages = self._slugs_by_tag.get(tag, set())
        elif WORD_PATTERN.fullmatch(tag):
            # "#" + word is a substring of a body exactly when some tag
            # in that body starts with word
            pages = set()
            for indexed, slugs in self._slugs_by_tag.items():
                if indexed.startswith(tag):
                    pages |= slugs
        else:
            return await super().find_pages_by_tag(tag)
        return TagPages(tag=tag, pages=sorted(pages))
