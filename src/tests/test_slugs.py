"""Unit tests for slug/path conversion."""

from pathlib import Path

import pytest

from tagwiki.core.errors import InvalidSlug, MalformedInput
from tagwiki.core.slugs import SlugCodec


@pytest.fixture
def codec(tmp_path):
    return SlugCodec(tmp_path)


class TestToPath:
    def test_appends_extension(self, codec, tmp_path):
        assert codec.to_path("HomePage") == tmp_path / "HomePage.md"

    def test_keeps_spaces(self, codec, tmp_path):
        assert codec.to_path("My Page") == tmp_path / "My Page.md"

    def test_deterministic(self, codec):
        assert codec.to_path("a") == codec.to_path("a")

    def test_custom_extension(self, tmp_path):
        codec = SlugCodec(tmp_path, ".txt")
        assert codec.to_path("notes") == tmp_path / "notes.txt"

    def test_empty_extension_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            SlugCodec(tmp_path, "")


class TestToSlug:
    def test_strips_extension(self, codec):
        assert codec.to_slug("HomePage.md") == "HomePage"

    def test_only_last_extension(self, codec):
        assert codec.to_slug("archive.md.md") == "archive.md"

    def test_other_extension_is_not_a_page(self, codec):
        assert codec.to_slug("image.png") is None
        assert codec.is_page_file("image.png") is False

    def test_extension_elsewhere_is_not_a_page(self, codec):
        assert codec.to_slug("readme.md.bak") is None

    def test_bare_extension_is_not_a_page(self, codec):
        assert codec.to_slug(".md") is None

    def test_dotfile_is_not_a_page(self, codec):
        assert codec.to_slug(".page.md.abc123.tmp") is None
        assert codec.to_slug(".hidden.md") is None

    def test_inverse_of_to_filename(self, codec):
        for slug in ["a", "My Page", "with.dots", "ünïcode"]:
            assert codec.to_slug(codec.to_filename(slug)) == slug


class TestValidation:
    @pytest.mark.parametrize(
        "slug",
        ["", "../etc/passwd", "a/b", "a\\b", "..", ".", ".hidden", "nul\x00byte"],
    )
    def test_rejects_unsafe_slugs(self, codec, slug):
        with pytest.raises(InvalidSlug):
            codec.to_path(slug)

    def test_invalid_slug_is_malformed_input(self):
        assert issubclass(InvalidSlug, MalformedInput)

    def test_accepts_dots_inside(self, codec):
        assert codec.validate("v1.2") == "v1.2"

    def test_path_stays_in_root(self, codec, tmp_path):
        assert codec.to_path("anything goes").parent == Path(tmp_path)
