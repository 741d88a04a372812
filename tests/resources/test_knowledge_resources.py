from __future__ import annotations

import asyncio
import json
import shutil
from pathlib import Path

import pytest

from avalonia_mcp.config import DEFAULT_DATA_DIR
from avalonia_mcp.resources import ControlsResource, MigrationGuideResource, XamlPatternsResource
from avalonia_mcp.resources.base import format_title
from avalonia_mcp.services.resource_cache import (
    ResourceCache,
    ResourceNotFoundError,
    ResourceParseError,
)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    target = tmp_path / "Data"
    shutil.copytree(DEFAULT_DATA_DIR, target)
    return target


def test_format_title_converts_snake_case() -> None:
    assert format_title("layout_controls") == "Layout Controls"
    assert format_title("data_display_controls") == "Data Display Controls"


def test_controls_reference_lists_categories_and_controls(data_dir: Path) -> None:
    async def run() -> None:
        resource = ControlsResource(ResourceCache(), data_dir)
        content = await resource.reference()
        assert content.startswith("# AvaloniaUI Controls Reference")
        assert "## Layout Controls" in content
        assert "### Grid" in content
        assert "**Key Properties:**\n- RowDefinitions" in content
        assert "```xml\n<Grid" in content

    asyncio.run(run())


def test_control_info_is_case_insensitive_and_cached_under_normalized_key(data_dir: Path) -> None:
    async def run() -> None:
        cache = ResourceCache()
        resource = ControlsResource(cache, data_dir)
        content = await resource.control_info("  TextBox ")
        assert content.startswith("### TextBox")
        assert "control:textbox" in cache
        assert "formatted_controls" not in cache

    asyncio.run(run())


def test_unknown_control_returns_message_without_caching(data_dir: Path) -> None:
    async def run() -> None:
        cache = ResourceCache()
        resource = ControlsResource(cache, data_dir)
        content = await resource.control_info("FancyWidget")
        assert content == "Control 'FancyWidget' not found in the reference"
        assert "control:fancywidget" not in cache

    asyncio.run(run())


def test_formatted_content_is_served_from_cache(data_dir: Path) -> None:
    async def run() -> None:
        resource = ControlsResource(ResourceCache(), data_dir)
        first = await resource.reference()
        (data_dir / "controls.json").unlink()
        assert await resource.reference() == first

    asyncio.run(run())


def test_missing_data_file_raises_not_found(tmp_path: Path) -> None:
    async def run() -> None:
        resource = MigrationGuideResource(ResourceCache(), tmp_path)
        with pytest.raises(ResourceNotFoundError):
            await resource.guide()

    asyncio.run(run())


def test_non_object_document_is_a_parse_error(tmp_path: Path) -> None:
    async def run() -> None:
        (tmp_path / "xaml-patterns.json").write_text(json.dumps([1, 2, 3]), encoding="utf-8")
        resource = XamlPatternsResource(ResourceCache(), tmp_path)
        with pytest.raises(ResourceParseError):
            await resource.patterns()

    asyncio.run(run())


def test_xaml_pattern_lookup_by_key_or_display_name(data_dir: Path) -> None:
    async def run() -> None:
        resource = XamlPatternsResource(ResourceCache(), data_dir)
        by_name = await resource.pattern("MVVM Window")
        by_key = await resource.pattern("mvvm_window")
        assert by_name == by_key
        assert by_name.startswith("## MVVM Window")
        assert "- Set x:DataType to enable compiled bindings" in by_name
        assert await resource.pattern("missing") == "XAML pattern 'missing' not found"

    asyncio.run(run())


def test_mvvm_patterns_only_include_mvvm_subset(data_dir: Path) -> None:
    async def run() -> None:
        resource = XamlPatternsResource(ResourceCache(), data_dir)
        content = await resource.mvvm_patterns()
        assert content.startswith("# MVVM Patterns for AvaloniaUI")
        assert "## MVVM Window" in content
        assert "## Data Binding" in content
        assert "## Custom Styles" not in content

    asyncio.run(run())


def test_migration_guide_sections(data_dir: Path) -> None:
    async def run() -> None:
        resource = MigrationGuideResource(ResourceCache(), data_dir)
        guide = await resource.guide()
        for title in (
            "## Namespace Changes",
            "## File Extension Changes",
            "## Control Compatibility",
            "## Data Binding Changes",
            "## Styling System Changes",
            "## Migration Process",
        ):
            assert title in guide
        assert "- Note: The .axaml extension" in guide

        mappings = await resource.control_mappings()
        assert "| Button | Button | Full | Same API |" in mappings
        assert "**RichTextBox**" in mappings

        changes = await resource.namespace_and_binding_changes()
        assert "- To: `https://github.com/avaloniaui`" in changes
        assert "**AvaloniaUI:** `{Binding #slider.Value}`" in changes

        steps = await resource.migration_steps()
        assert "1. **Create a new AvaloniaUI project**" in steps
        assert "4. **Replace unsupported controls**" in steps

    asyncio.run(run())


def test_resources_share_one_raw_document_entry(data_dir: Path) -> None:
    async def run() -> None:
        cache = ResourceCache()
        resource = MigrationGuideResource(cache, data_dir)
        await resource.guide()
        await resource.migration_steps()
        keys = cache.stats().keys
        assert [key for key in keys if key.startswith("json:")] == [f"json:{data_dir / 'migration-guide.json'}"]
        assert "formatted_migration_guide" in keys
        assert "migration:steps" in keys

    asyncio.run(run())
