"""Tests for the example configuration generator."""

import pytest

from content_to_reader.services.configuration import ConfigurationParser
from content_to_reader.services.example_config import (
    EXAMPLE_CONFIG,
    generate_example_config_file,
)


class TestGenerateExampleConfig:
    @pytest.mark.asyncio
    async def test_writes_file(self, tmp_path):
        path = await generate_example_config_file(tmp_path / "config.yaml")

        assert path == tmp_path / "config.yaml"
        assert path.read_text(encoding="utf-8") == EXAMPLE_CONFIG

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,expected", [("cfg", "cfg.yaml"), ("cfg.txt", "cfg.yaml"), ("cfg.yml", "cfg.yml")])
    async def test_extension(self, tmp_path, name, expected):
        path = await generate_example_config_file(tmp_path / name)

        assert path.name == expected
        assert path.exists()

    @pytest.mark.asyncio
    async def test_example_is_a_valid_configuration(self, tmp_path):
        path = await generate_example_config_file(tmp_path / "config.yaml")

        configuration = await ConfigurationParser(path).get()

        assert configuration.output == "news.epub"
        assert configuration.to_device is None
        assert [page.url for page in configuration.pages] == [
            "https://page.com",
            "https://page.com/post",
        ]
        assert configuration.pages[0].selectors is None
        header, content = configuration.pages[1].selectors
        assert header.name == "Header"
        assert header.mode == "first"
        assert header.query == ".page-content header"
        assert content.mode == "all"
        assert content.query.startswith(".page-content .contents h1, .page-content .contents h2")
        assert ".page-content .contents .custom-tip .some-class p" in content.query
