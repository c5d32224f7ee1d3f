"""Tests for output path sanitization."""

import pytest

from content_to_reader.errors import ConfigurationError
from content_to_reader.services.output_path import sanitize_output_path


class TestSanitizeOutputPath:
    @pytest.mark.parametrize(
        "output,expected",
        [
            ("news.epub", "news.epub"),
            ("news", "news.epub"),
            ("news.EPUB", "news.epub"),
            ("books/today", "books/today.epub"),
            ("  spaced.epub  ", "spaced.epub"),
        ],
    )
    def test_accepted(self, output, expected):
        assert sanitize_output_path(output) == expected

    @pytest.mark.parametrize("output", ["news.pdf", "news.mobi", "archive.tar.gz"])
    def test_other_extensions_rejected(self, output):
        with pytest.raises(ConfigurationError, match="Only `.epub` extension is accepted"):
            sanitize_output_path(output)

    @pytest.mark.parametrize("output", ["", "   "])
    def test_empty_rejected(self, output):
        with pytest.raises(ConfigurationError, match="can't be empty"):
            sanitize_output_path(output)

    def test_no_filename_rejected(self):
        with pytest.raises(ConfigurationError, match="doesn't name a file"):
            sanitize_output_path("/")
