"""Tests for the layout cookbook recipes and HTML generation."""

import pytest
from lxml import etree
from lxml import html as lxml_html

from slideshow_toolkit.analyze import analyze, parse_markdown
from slideshow_toolkit.content import Deck, Layout, LayoutDecision, SlideRecord
from slideshow_toolkit.cookbook import (
    COOKBOOK,
    GRID_COLUMNS,
    LayoutRecipe,
    RegionSpec,
    build_deck_html,
    build_slide_html,
    get_recipe,
    list_recipes,
)


def _record(markdown_text, layout, index=0):
    content = parse_markdown(markdown_text)
    return SlideRecord(
        source=f"{index}.md",
        content=content,
        features=analyze(content.raw_markdown),
        decision=LayoutDecision(layout=layout, reasoning="test", confidence=0.8),
        reasoning="test",
        index=index,
    )


def _region(section, name):
    return section.xpath(f'./div[contains(@class, "region-{name}")]')[0]


# ============================================================
# RegionSpec TESTS
# ============================================================

def test_region_spec_defaults_to_full_width():
    assert RegionSpec("body", "body").columns == GRID_COLUMNS


@pytest.mark.parametrize("columns", [0, 13])
def test_region_spec_rejects_bad_span(columns):
    with pytest.raises(ValueError):
        RegionSpec("body", "body", columns=columns)


# ============================================================
# RECIPE REGISTRY TESTS
# ============================================================

def test_cookbook_covers_every_layout():
    assert set(COOKBOOK.keys()) == set(Layout)


def test_list_recipes_returns_all():
    names = list_recipes()
    assert len(names) == 12
    assert "section-break" in names
    assert "code-focus" in names


def test_get_recipe_by_name_and_enum():
    assert get_recipe("two-column") is COOKBOOK[Layout.two_column]
    assert get_recipe(Layout.hero).name == "hero"


def test_get_recipe_not_found():
    assert get_recipe("nonexistent_layout") is None


def test_all_recipes_have_title_and_body():
    for layout, recipe in COOKBOOK.items():
        assert recipe.description, f"Recipe '{layout.value}' has no description"
        assert len(recipe.regions_for("title")) == 1
        assert recipe.regions_for("body"), f"Recipe '{layout.value}' has no body region"


def test_recipe_css_class():
    assert COOKBOOK[Layout.image_text].css_class == "layout-image-text"


# ============================================================
# HTML GENERATION TESTS
# ============================================================

def test_slide_section_attributes():
    section = build_slide_html(_record("# Hello\n\nWorld", Layout.hero, index=0))

    assert section.tag == "section"
    assert section.get("class") == "slide layout-hero centered"
    assert section.get("id") == "slide-1"
    assert section.get("data-layout") == "hero"
    assert section.get("data-index") == "0"
    assert section.get("data-reasoning") == "test"


def test_heading_goes_to_title_region():
    section = build_slide_html(_record("# Hello\n\nWorld", Layout.content_center))

    assert _region(section, "title").xpath("./h1")[0].text == "Hello"
    assert _region(section, "body").xpath("./p")[0].text == "World"


def test_images_go_to_media_region():
    record = _record("# Cat\n\n![cat](cat.png)\n\nA cat sits.", Layout.image_text)
    section = build_slide_html(record)

    media = _region(section, "media")
    assert media.xpath(".//img")[0].get("src") == "cat.png"
    assert not _region(section, "body").xpath(".//img")


def test_images_stay_in_body_without_media_region():
    record = _record("![cat](cat.png)\n\nA cat sits.", Layout.content_center)
    section = build_slide_html(record)

    assert _region(section, "body").xpath(".//img")


def test_two_column_splits_body_in_order():
    record = _record("## Pros and cons\n\nOne\n\nTwo\n\nThree", Layout.two_column)
    section = build_slide_html(record)

    left = [p.text for p in _region(section, "col_left").xpath("./p")]
    right = [p.text for p in _region(section, "col_right").xpath("./p")]
    assert left == ["One", "Two"]
    assert right == ["Three"]


def test_explicit_recipe_overrides_layout():
    recipe = LayoutRecipe(layout=Layout.quote, regions=[RegionSpec("only", "body")])
    section = build_slide_html(_record("# Hi\n\nText", Layout.hero), recipe=recipe)

    assert section.get("data-layout") == "quote"
    assert [h.text for h in _region(section, "only").xpath("./h1")] == ["Hi"]


def test_empty_slide_renders_empty_regions():
    section = build_slide_html(_record("", Layout.section_break))
    assert len(section) == 2
    assert all(len(region) == 0 for region in section)


def test_build_deck_html_document():
    deck = Deck(slides=[
        _record("# Intro", Layout.hero, index=0),
        _record("```\ncode\n```", Layout.code_focus, index=1),
    ])
    document = build_deck_html(deck, title="My Talk", stylesheet="deck.css")

    assert document.startswith("<!DOCTYPE html>")
    root = lxml_html.fromstring(document)
    assert root.findtext(".//title") == "My Talk"
    assert root.xpath('//link[@rel="stylesheet"]/@href') == ["deck.css"]
    sections = root.xpath("//main/section")
    assert [s.get("data-layout") for s in sections] == ["hero", "code-focus"]
    assert root.xpath("//main/@data-slide-count") == ["2"]


def test_slide_html_serializes():
    section = build_slide_html(_record("# A & B", Layout.hero))
    text = etree.tostring(section, method="html", encoding="unicode")
    assert "A &amp; B" in text


def test_control_characters_are_dropped_from_attributes():
    record = _record("# Hi", Layout.quote).model_copy(
        update={"reasoning": "bad\x01char", "source": "a\x0bb.md"}
    )
    section = build_slide_html(record)

    assert section.get("data-reasoning") == "badchar"
    assert section.get("data-source") == "ab.md"


def test_deck_html_with_control_characters():
    record = _record("# Hi", Layout.quote).model_copy(update={"reasoning": "bad\x01char"})
    document = build_deck_html(Deck(slides=[record]), title="Talk\x07")

    root = lxml_html.fromstring(document)
    assert root.findtext(".//title") == "Talk"
    assert root.xpath("//section/@data-reasoning") == ["badchar"]
