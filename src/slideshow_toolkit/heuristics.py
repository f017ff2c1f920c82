"""
Heuristic Layout Classifier

Ordered rule table mapping a FeatureVector and slide position to a
LayoutDecision. The first matching rule wins; the same inputs always give
the same decision.
"""

from dataclasses import dataclass
from typing import Callable, List

from .content import FeatureVector, Layout, LayoutDecision

# Decisions at or above this confidence skip refinement
HIGH_CONFIDENCE_THRESHOLD = 0.90


@dataclass(frozen=True)
class LayoutRule:
    """One row of the rule table."""
    name: str
    layout: Layout
    confidence: float
    reasoning: str
    matches: Callable[[FeatureVector, int], bool]

    def decide(self) -> LayoutDecision:
        return LayoutDecision(
            layout=self.layout,
            reasoning=self.reasoning,
            confidence=self.confidence,
        )


RULES: List[LayoutRule] = [
    LayoutRule(
        name="opening_title",
        layout=Layout.hero,
        confidence=0.95,
        reasoning="First slide with H1 heading -> Hero layout",
        matches=lambda v, pos: pos == 0 and v.heading_level == 1,
    ),
    LayoutRule(
        name="bare_heading",
        layout=Layout.section_break,
        confidence=0.90,
        reasoning="H1 with minimal content -> Section break",
        matches=lambda v, pos: (
            v.heading_level == 1
            and v.paragraph_count == 0
            and v.list_item_count == 0
            and v.total_words < 50
        ),
    ),
    LayoutRule(
        name="code_dominant",
        layout=Layout.code_focus,
        confidence=0.85,
        reasoning="Code block dominant -> Code focus",
        matches=lambda v, pos: v.code_block_count >= 1 and v.paragraph_count <= 2,
    ),
    LayoutRule(
        name="image_with_text",
        layout=Layout.image_text,
        confidence=0.80,
        reasoning="Image and text present -> Image-text layout",
        matches=lambda v, pos: v.image_count >= 1 and v.paragraph_count >= 1,
    ),
    LayoutRule(
        name="list_dominant",
        layout=Layout.list_emphasize,
        confidence=0.85,
        reasoning="Multiple list items -> List emphasize",
        matches=lambda v, pos: v.list_item_count >= 3 and v.paragraph_count <= 1,
    ),
    LayoutRule(
        name="multiple_quotes",
        layout=Layout.quote,
        confidence=0.80,
        reasoning="Multiple quotes -> Quote layout",
        matches=lambda v, pos: v.quote_count >= 2,
    ),
    LayoutRule(
        name="table_present",
        layout=Layout.comparison,
        confidence=0.80,
        reasoning="Table present -> Comparison layout",
        matches=lambda v, pos: v.table_count >= 1,
    ),
    LayoutRule(
        name="balanced_content",
        layout=Layout.two_column,
        confidence=0.70,
        reasoning="Balanced content -> Two-column layout",
        matches=lambda v, pos: (
            v.paragraph_count >= 2
            and v.list_item_count >= 2
            and v.total_words >= 100
        ),
    ),
]

DEFAULT_DECISION = LayoutDecision(
    layout=Layout.content_center,
    reasoning="No specific pattern matched -> Default center layout",
    confidence=0.50,
)


def classify(vector: FeatureVector, slide_position: int) -> LayoutDecision:
    """Pick a layout for a slide from its structure and position.

    Args:
        vector: Structural features of the slide body
        slide_position: Zero-based position of the slide in the deck

    Returns:
        The decision of the first matching rule, or the content-center default
    """
    for rule in RULES:
        if rule.matches(vector, slide_position):
            return rule.decide()
    return DEFAULT_DECISION


def is_confident(decision: LayoutDecision) -> bool:
    """True when a decision is strong enough to skip refinement."""
    return decision.confidence >= HIGH_CONFIDENCE_THRESHOLD
