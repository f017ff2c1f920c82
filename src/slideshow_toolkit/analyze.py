"""
Structural Analysis

Splits a Markdown document into front matter, body and rendered HTML, and
scans the raw body into a FeatureVector. The scan works on the Markdown
source, never on the rendered output, and never raises: text that does not
match a pattern simply yields a zero count.
"""

import logging
import re
from typing import Any, Dict, Optional, Tuple

import markdown
import yaml

from .content import FeatureVector, ParsedContent
from .errors import FrontMatterError

logger = logging.getLogger(__name__)


# ============================================================
# PATTERNS
# ============================================================

_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)

_HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(.*)$", re.MULTILINE)
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\n+")
_LIST_ITEM_RE = re.compile(r"^[ \t]*[-*+][ \t]+", re.MULTILINE)
_CODE_BLOCK_RE = re.compile(r"```.*?```", re.DOTALL)
_IMAGE_RE = re.compile(r"!\[.*?\]\(.*?\)")
_QUOTE_RE = re.compile(r"^>[ \t]+", re.MULTILINE)
_TABLE_SEPARATOR_RE = re.compile(r"^\|[ \t]*[-:]+[ \t]*\|", re.MULTILINE)

_INLINE_CODE_RE = re.compile(r"`[^`]+`")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(.*?\)")
_MARKDOWN_PUNCTUATION_RE = re.compile(r"[#*_~`>|\-]")
_CJK_RE = re.compile(r"[\u3000-\u303f\u3040-\u309f\u30a0-\u30ff\uff00-\uff9f\u4e00-\u9faf]")

# Block prefixes that mark a blank-line block as something other than a paragraph
_NON_PARAGRAPH_PREFIXES = ("#", "```", "-", "*", "+", ">", "|")

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "nl2br"]


# ============================================================
# PARSING
# ============================================================

def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_front_matter(text: str) -> Tuple[Dict[str, Any], str]:
    """Split a leading YAML metadata block from the Markdown body.

    Returns ({}, text) when the document has no metadata block. The body
    keeps its original line endings; keys are converted to strings.

    Raises:
        FrontMatterError: If the block is not valid YAML or not a mapping
    """
    match = _FRONT_MATTER_RE.match(text)
    if not match:
        return {}, text

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"Invalid front matter: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"Front matter must be a mapping, got {type(data).__name__}"
        )

    return {str(key): value for key, value in data.items()}, text[match.end():]


def render_html(body: str) -> str:
    """Render a Markdown body to HTML."""
    return markdown.markdown(body, extensions=MARKDOWN_EXTENSIONS)


def parse_markdown(text: str) -> ParsedContent:
    """Parse a Markdown document into front matter, body and HTML."""
    front_matter, body = split_front_matter(text)
    return ParsedContent(
        front_matter=front_matter,
        raw_markdown=body,
        html=render_html(body),
    )


# ============================================================
# FEATURE EXTRACTION
# ============================================================

def extract_heading(body: str) -> Tuple[Optional[int], Optional[str]]:
    """Return (level, text) of the first ATX heading, or (None, None)."""
    match = _HEADING_RE.search(body)
    if not match:
        return None, None
    text = match.group(2).strip()
    return len(match.group(1)), text or None


def count_paragraphs(body: str) -> int:
    count = 0
    for block in _PARAGRAPH_SPLIT_RE.split(body):
        trimmed = block.strip()
        if trimmed and not trimmed.startswith(_NON_PARAGRAPH_PREFIXES):
            count += 1
    return count


def count_words(body: str) -> int:
    """Count words, or non-whitespace characters when the text contains CJK.

    A single CJK character anywhere switches the whole text to character
    counting.
    """
    text = _CODE_BLOCK_RE.sub("", body)
    text = _INLINE_CODE_RE.sub("", text)
    text = _IMAGE_RE.sub("", text)
    text = _LINK_RE.sub(r"\1", text)
    text = _MARKDOWN_PUNCTUATION_RE.sub("", text).strip()

    if _CJK_RE.search(text):
        return len(re.sub(r"\s+", "", text))
    return len(text.split())


def analyze(body: str) -> FeatureVector:
    """Scan a Markdown body into a FeatureVector.

    Args:
        body: Markdown text with any front matter already removed

    Returns:
        FeatureVector with non-negative counts
    """
    raw = body or ""
    body = _normalize_newlines(raw)
    heading_level, heading_text = extract_heading(body)

    vector = FeatureVector(
        heading_level=heading_level,
        heading_text=heading_text,
        paragraph_count=count_paragraphs(body),
        list_item_count=len(_LIST_ITEM_RE.findall(body)),
        code_block_count=len(_CODE_BLOCK_RE.findall(body)),
        image_count=len(_IMAGE_RE.findall(body)),
        quote_count=len(_QUOTE_RE.findall(body)),
        table_count=len(_TABLE_SEPARATOR_RE.findall(body)),
        total_characters=len(raw),
        total_words=count_words(body),
    )
    logger.debug("Analyzed slide: %s", vector.model_dump())
    return vector
