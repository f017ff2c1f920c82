"""Tests for front matter parsing and structural analysis."""

import pytest

from slideshow_toolkit.analyze import (
    analyze,
    count_words,
    extract_heading,
    parse_markdown,
    split_front_matter,
)
from slideshow_toolkit.errors import FrontMatterError


# ============================================================
# FRONT MATTER / PARSING TESTS
# ============================================================

def test_parse_markdown_with_front_matter():
    text = "---\ntitle: Hello\nlayout: quote\ntags: [a, b]\n---\n# Body\n"
    content = parse_markdown(text)

    assert content.title == "Hello"
    assert content.layout_override == "quote"
    assert content.tags == ["a", "b"]
    assert content.raw_markdown == "# Body\n"
    assert "<h1>Body</h1>" in content.html


def test_parse_markdown_without_front_matter():
    content = parse_markdown("Just text.")
    assert content.front_matter == {}
    assert content.raw_markdown == "Just text."
    assert content.html == "<p>Just text.</p>"


def test_empty_front_matter_block():
    front_matter, body = split_front_matter("---\n---\nBody")
    assert front_matter == {}
    assert body == "Body"


def test_front_matter_with_crlf():
    front_matter, body = split_front_matter("---\r\ntitle: X\r\n---\r\nBody\r\n")
    assert front_matter == {"title": "X"}
    assert body == "Body\r\n"


def test_front_matter_keys_become_strings():
    front_matter, _ = split_front_matter("---\n2024: kickoff\non: stage\ntitle: Intro\n---\nBody")
    assert front_matter == {"2024": "kickoff", "True": "stage", "title": "Intro"}


def test_horizontal_rule_later_is_not_front_matter():
    front_matter, body = split_front_matter("Intro\n---\nMore")
    assert front_matter == {}
    assert body == "Intro\n---\nMore"


def test_invalid_front_matter_raises():
    with pytest.raises(FrontMatterError, match="Invalid front matter"):
        split_front_matter("---\ntitle: [unclosed\n---\nbody")


def test_non_mapping_front_matter_raises():
    with pytest.raises(FrontMatterError, match="must be a mapping"):
        split_front_matter("---\n- a\n- b\n---\nbody")


def test_html_renders_tables_and_code():
    content = parse_markdown("| a | b |\n|---|---|\n| 1 | 2 |\n\n```python\nx = 1\n```\n")
    assert "<table>" in content.html
    assert "<code" in content.html


# ============================================================
# HEADING TESTS
# ============================================================

def test_first_heading_wins():
    assert extract_heading("Intro\n## Sub heading  \n# Main") == (2, "Sub heading")


def test_heading_requires_whitespace():
    assert extract_heading("#hashtag\n####### seven") == (None, None)


def test_heading_without_text():
    level, text = extract_heading("### \nbody")
    assert level == 3
    assert text is None


# ============================================================
# COUNT TESTS
# ============================================================

def test_paragraph_count_skips_structured_blocks():
    body = "# H\n\nPara one\n\n- item\n\n+ plus item\n\nPara two\n\n> quote\n\n| t |\n\n```\ncode\n```"
    assert analyze(body).paragraph_count == 2


def test_list_item_markers():
    assert analyze("- a\n* b\n+ c\n  - d\n-e").list_item_count == 4


def test_code_block_count():
    assert analyze("```\na\n```\n\n```js\nb\n```\n\n```").code_block_count == 2


def test_image_count():
    assert analyze("![alt](a.png) and ![b](c.png)").image_count == 2


def test_quote_count_needs_whitespace():
    assert analyze("> one\n> two\n>three").quote_count == 2


def test_table_count_uses_separator_rows():
    body = "| a | b |\n|---|---|\n| 1 | 2 |\n\n| c |\n|:--:|\n"
    assert analyze(body).table_count == 2


def test_total_characters_is_body_length():
    assert analyze("abc\n\ndef").total_characters == 8


def test_total_characters_counts_crlf_as_given():
    vector = analyze("abc\r\n\r\ndef")
    assert vector.total_characters == 10
    assert vector.paragraph_count == 2


# ============================================================
# WORD COUNT TESTS
# ============================================================

def test_word_count_strips_markdown():
    body = "# Title here\n\nSome **bold** text with `inline code` and a [link text](http://x).\n\n![img](a.png)"
    # Title here Some bold text with and a link text.
    assert count_words(body) == 10


def test_word_count_ignores_code_blocks():
    assert count_words("```\none two three\n```\nfour") == 1


def test_word_count_cjk_counts_characters():
    assert count_words("# こんにちは世界") == 7


def test_word_count_mixed_script_switches_whole_text():
    assert count_words("Hello world 日本") == 12


def test_word_count_empty():
    assert count_words("") == 0


# ============================================================
# TOTALITY TESTS
# ============================================================

@pytest.mark.parametrize("body", [
    "",
    "```",
    "![](",
    "[](",
    "|",
    "> ",
    "#",
    "\x00\x01",
    "---\n---",
    "\n\n\n\n",
    "*" * 100,
])
def test_analyze_never_raises_and_counts_are_non_negative(body):
    vector = analyze(body)
    counts = vector.model_dump(exclude={"heading_level", "heading_text"})
    assert all(value >= 0 for value in counts.values())


def test_analyze_is_idempotent():
    body = "# Title\n\nText with words.\n\n- a\n- b\n\n```\ncode\n```"
    assert analyze(body) == analyze(body)


def test_analyze_full_slide():
    body = "# Results\n\nWe measured things.\n\n- fast\n- cheap\n- good\n\n> Impressive work\n"
    vector = analyze(body)

    assert vector.heading_level == 1
    assert vector.heading_text == "Results"
    assert vector.paragraph_count == 1
    assert vector.list_item_count == 3
    assert vector.quote_count == 1
    assert vector.code_block_count == 0
    assert vector.image_count == 0
    assert vector.table_count == 0
