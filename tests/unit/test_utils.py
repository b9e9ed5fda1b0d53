"""
Unit tests for utility modules (atomic writes and slugification).
"""

from unittest.mock import patch

import pytest

from webscribe.utils import atomic_write_text, safe_filename, slugify


class TestAtomicWrite:
    """Test atomic file writing utilities."""

    def test_basic_write(self, tmp_path):
        target = tmp_path / "notes.md"

        atomic_write_text(target, "# Title\n")

        assert target.read_text(encoding="utf-8") == "# Title\n"

    def test_overwrite(self, tmp_path):
        target = tmp_path / "notes.md"
        atomic_write_text(target, "first")
        atomic_write_text(target, "second")

        assert target.read_text(encoding="utf-8") == "second"

    def test_creates_parent_dir(self, tmp_path):
        target = tmp_path / "nested" / "deep" / "notes.md"

        atomic_write_text(target, "content")

        assert target.exists()

    def test_unicode(self, tmp_path):
        target = tmp_path / "unicode.md"
        content = "Größe — 日本語 — émoji 🎉"

        atomic_write_text(target, content)

        assert target.read_text(encoding="utf-8") == content

    def test_no_temp_files_left(self, tmp_path):
        atomic_write_text(tmp_path / "notes.md", "content")

        assert [p.name for p in tmp_path.iterdir()] == ["notes.md"]

    def test_failure_cleans_up(self, tmp_path):
        target = tmp_path / "notes.md"

        with patch("webscribe.utils.atomic.os.replace", side_effect=OSError("boom")), patch(
            "webscribe.utils.atomic.shutil.move", side_effect=OSError("still boom")
        ):
            with pytest.raises(OSError, match="Failed to atomically write"):
                atomic_write_text(target, "content")

        assert list(tmp_path.iterdir()) == []


class TestSlugify:
    def test_basic(self):
        assert slugify("Hello World!") == "hello-world"

    def test_punctuation_and_spaces(self):
        assert slugify("Step 2: Install  the CLI") == "step-2-install-the-cli"

    def test_collapses_hyphens(self):
        assert slugify("a - b -- c") == "a-b-c"

    def test_empty(self):
        assert slugify("") == ""
        assert slugify("   ") == ""

    def test_max_length(self):
        assert slugify("alpha beta gamma", max_length=11) == "alpha-beta"

    def test_stable(self):
        assert slugify("Same Heading") == slugify("Same Heading")


class TestSafeFilename:
    def test_reserved_characters(self):
        assert safe_filename('Intro: "Why" / How') == "intro-why-how"

    def test_fallback(self):
        assert safe_filename("") == "webscribe-notes"
        assert safe_filename(None) == "webscribe-notes"
        assert safe_filename('???') == "webscribe-notes"

    def test_max_length(self):
        assert len(safe_filename("word " * 50)) <= 80
        assert safe_filename("word " * 50, max_length=10) == "word-word"

    def test_strips_trailing_dots(self):
        assert safe_filename("Version 1.") == "version-1"

    @pytest.mark.parametrize("title", ["CON", "con", "Aux", "LPT1", "nul report"])
    def test_windows_reserved_names(self, title):
        assert safe_filename(title).endswith("-reserved")

    def test_control_characters(self):
        assert safe_filename("tab\x00null\x1fend") == "tabnullend"
