"""
Slide Deck Models

Pydantic v2 models for the validated intermediate representation between
Markdown analysis and rendering: feature vectors, layout decisions, slide
records and the deck that holds them.
"""

import json
import uuid
from collections import Counter
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class Layout(str, Enum):
    """The closed set of visual layout templates a slide can use."""
    hero = "hero"
    section_break = "section-break"
    content_left = "content-left"
    content_center = "content-center"
    two_column = "two-column"
    code_focus = "code-focus"
    image_text = "image-text"
    list_emphasize = "list-emphasize"
    quote = "quote"
    comparison = "comparison"
    timeline = "timeline"
    diagram = "diagram"

    @classmethod
    def parse(cls, value: Any) -> Optional["Layout"]:
        """Return the layout named exactly by value, or None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class FeatureVector(BaseModel):
    """Structural summary of one slide's Markdown body."""
    model_config = ConfigDict(frozen=True)

    heading_level: Optional[int] = Field(default=None, ge=1, le=6)
    heading_text: Optional[str] = None
    paragraph_count: int = Field(default=0, ge=0)
    list_item_count: int = Field(default=0, ge=0)
    code_block_count: int = Field(default=0, ge=0)
    image_count: int = Field(default=0, ge=0)
    quote_count: int = Field(default=0, ge=0)
    table_count: int = Field(default=0, ge=0)
    total_characters: int = Field(default=0, ge=0)
    total_words: int = Field(default=0, ge=0)


class LayoutDecision(BaseModel):
    """A chosen layout with its justification and confidence."""
    model_config = ConfigDict(frozen=True)

    layout: Layout
    reasoning: str
    confidence: float = Field(ge=0.0, le=1.0)


class ParsedContent(BaseModel):
    """A Markdown document split into front matter, body and rendered HTML."""
    model_config = ConfigDict(frozen=True)

    front_matter: Dict[str, Any] = Field(default_factory=dict)
    raw_markdown: str = ""
    html: str = ""

    def _text(self, key: str) -> Optional[str]:
        value = self.front_matter.get(key)
        return str(value) if value is not None else None

    @property
    def title(self) -> Optional[str]:
        return self._text("title")

    @property
    def author(self) -> Optional[str]:
        return self._text("author")

    @property
    def date(self) -> Optional[str]:
        return self._text("date")

    @property
    def tags(self) -> List[str]:
        tags = self.front_matter.get("tags") or []
        if isinstance(tags, str):
            return [t.strip() for t in tags.split(",") if t.strip()]
        if not isinstance(tags, (list, tuple)):
            return [str(tags)]
        return [str(t) for t in tags]

    @property
    def layout_override(self) -> Any:
        """``layout`` value from the front matter (strings trimmed), unvalidated."""
        value = self.front_matter.get("layout")
        return value.strip() if isinstance(value, str) else value


class SlideRecord(BaseModel):
    """One slide of a loaded deck."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    source: str
    content: ParsedContent
    features: FeatureVector
    decision: LayoutDecision
    reasoning: str
    index: int = Field(ge=0)
    refined: bool = False

    @property
    def layout(self) -> Layout:
        return self.decision.layout


class Deck(BaseModel):
    """The ordered collection of slide records produced by one load."""
    model_config = ConfigDict(frozen=True)

    slides: Tuple[SlideRecord, ...] = ()
    generated_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    refinement_enabled: bool = False

    @field_validator("slides")
    @classmethod
    def indices_match_positions(cls, slides: Tuple[SlideRecord, ...]) -> Tuple[SlideRecord, ...]:
        for position, slide in enumerate(slides):
            if slide.index != position:
                raise ValueError(
                    f"Slide '{slide.source}' has index {slide.index} but sits at position {position}"
                )
        return slides

    def __len__(self) -> int:
        return len(self.slides)

    def layout_counts(self) -> Dict[str, int]:
        """Return how often each layout is used, in first-use order."""
        return dict(Counter(s.layout.value for s in self.slides))


# ============================================================
# SERIALIZATION
# ============================================================

def save_deck(deck: Deck, path: Union[str, Path]) -> None:
    """Save a Deck to a JSON file."""
    path = Path(path)
    data = deck.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def load_deck_json(path: Union[str, Path]) -> Deck:
    """Load a Deck from a JSON file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return Deck(**data)


# ============================================================
# VALIDATION
# ============================================================

def validate_deck_json(path: Union[str, Path]) -> List[str]:
    """Validate a deck JSON file and return a list of error strings.

    Returns an empty list when the document is valid.
    """
    path = Path(path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        return [f"Invalid JSON: {exc}"]
    except FileNotFoundError:
        return [f"File not found: {path}"]

    if not isinstance(data, dict):
        return ["(root): expected a JSON object"]

    errors: List[str] = []
    try:
        Deck(**data)
    except ValidationError as exc:
        for error in exc.errors():
            json_path = " -> ".join(str(p) for p in error["loc"]) if error["loc"] else "(root)"
            errors.append(f"{json_path}: {error['msg']}")
    return errors
