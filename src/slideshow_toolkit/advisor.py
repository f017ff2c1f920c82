"""
Refinement Advisor

Second opinion on low-confidence heuristic layouts from Claude (Anthropic
Messages API). The advisor only ever improves or passes through: every
failure on the refinement path returns the heuristic decision unchanged,
marked as a fallback.

Requires:
    pip install anthropic
    export ANTHROPIC_API_KEY="sk-ant-..."
"""

import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import anthropic

from .config import ToolkitConfig, load_config
from .content import FeatureVector, Layout, LayoutDecision
from .cookbook import COOKBOOK
from .errors import AdvisorUnavailableError, InvalidReplyError
from .heuristics import classify, is_confident

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.8
DEFAULT_REASONING = "AI selected layout"


class RefinementOutcome(str, Enum):
    """How a layout decision was reached."""
    skipped = "skipped"      # heuristic was confident enough
    refined = "refined"      # the advisor's reply was accepted
    fell_back = "fell_back"  # refinement failed; heuristic returned as-is


@dataclass(frozen=True)
class RefinementResult:
    """A layout decision plus a marker of how it was produced."""
    decision: LayoutDecision
    outcome: RefinementOutcome
    error: Optional[str] = None

    @property
    def fell_back(self) -> bool:
        return self.outcome == RefinementOutcome.fell_back

    @property
    def refined(self) -> bool:
        return self.outcome == RefinementOutcome.refined


# ============================================================
# PROMPT
# ============================================================

def _format_layouts() -> str:
    return "\n".join(
        f"- {recipe.name}: {recipe.description}" for recipe in COOKBOOK.values()
    )


def build_prompt(
    vector: FeatureVector,
    content_excerpt: str,
    previous_layout: Optional[Layout],
    slide_position: int,
    heuristic_decision: LayoutDecision,
    excerpt_length: int = 500,
) -> str:
    """Build the layout-selection prompt for one slide."""
    heading_level = f"H{vector.heading_level}" if vector.heading_level else "None"
    previous = previous_layout.value if previous_layout else "None (first slide)"

    return f"""You are an expert presentation designer. Analyze the following slide content and select the most appropriate layout.

**Available Layouts:**
{_format_layouts()}

**Content Analysis:**
- Slide number: {slide_position + 1}
- Heading level: {heading_level}
- Heading text: {vector.heading_text or 'None'}
- Paragraphs: {vector.paragraph_count}
- List items: {vector.list_item_count}
- Code blocks: {vector.code_block_count}
- Images: {vector.image_count}
- Quotes: {vector.quote_count}
- Tables: {vector.table_count}
- Total words: {vector.total_words}

**Previous Layout:** {previous}

**Heuristic Suggestion:** {heuristic_decision.layout.value} (confidence: {heuristic_decision.confidence})

**Content Preview:**
```
{content_excerpt[:excerpt_length]}
```

**Instructions:**
1. Consider the content structure and type
2. Consider flow and consistency with previous layout
3. Select ONE layout that best fits the content
4. Provide reasoning in ONE sentence

**Response Format (JSON only):**
{{
  "layout": "layout-name",
  "reasoning": "Your one-sentence reasoning",
  "confidence": 0.95
}}"""


# ============================================================
# REPLY PARSING
# ============================================================

def _balanced_end(text: str, start: int) -> Optional[int]:
    """Index just past the brace closing the object opened at `start`."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return None


def extract_json_object(text: str) -> Optional[str]:
    """Return the first balanced {...} substring of text, or None."""
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end is not None:
            return text[start:end]
        start = text.find("{", start + 1)
    return None


def _coerce_confidence(value: Any) -> float:
    if isinstance(value, bool) or not value:
        return DEFAULT_CONFIDENCE
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return DEFAULT_CONFIDENCE
    if math.isnan(confidence):
        return DEFAULT_CONFIDENCE
    return min(max(confidence, 0.0), 1.0)


def parse_reply(text: str) -> LayoutDecision:
    """Parse a refinement reply into a validated LayoutDecision.

    Raises:
        InvalidReplyError: No JSON object, unparsable JSON, or unknown layout
    """
    candidate = extract_json_object(text or "")
    if candidate is None:
        raise InvalidReplyError("No JSON found in response")

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise InvalidReplyError(f"Malformed JSON in response: {exc}") from exc

    if not isinstance(parsed, dict):
        raise InvalidReplyError("Response JSON is not an object")

    layout = Layout.parse(parsed.get("layout"))
    if layout is None:
        raise InvalidReplyError(f"Invalid layout: {parsed.get('layout')!r}")

    reasoning = parsed.get("reasoning")
    if not isinstance(reasoning, str) or not reasoning.strip():
        reasoning = DEFAULT_REASONING

    return LayoutDecision(
        layout=layout,
        reasoning=reasoning,
        confidence=_coerce_confidence(parsed.get("confidence")),
    )


# ============================================================
# ADVISOR
# ============================================================

class RefinementAdvisor:
    """Asks Claude to confirm or replace low-confidence heuristic layouts.

    Example:
        advisor = RefinementAdvisor(load_config())
        result = await advisor.select_layout(vector, body, previous, 3)
    """

    def __init__(
        self,
        config: Optional[ToolkitConfig] = None,
        client: Optional[Any] = None,
    ):
        """
        Args:
            config: Toolkit configuration; loaded from the environment if omitted
            client: Pre-built async Anthropic client (tests inject fakes here)

        Raises:
            AdvisorUnavailableError: If no client is given and no API key is configured
        """
        self.config = config or load_config()

        if client is None:
            if not self.config.has_api_key:
                raise AdvisorUnavailableError(
                    "ANTHROPIC_API_KEY is not set. Layout refinement is disabled."
                )
            # A failed call falls back immediately; the SDK must not retry
            client = anthropic.AsyncAnthropic(api_key=self.config.api_key, max_retries=0)

        self._client = client
        self.calls = 0

    async def _complete(self, prompt: str) -> str:
        self.calls += 1
        message = await self._client.messages.create(
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            messages=[{"role": "user", "content": prompt}],
        )
        return "".join(
            block.text for block in message.content
            if getattr(block, "type", None) == "text"
        )

    async def refine(
        self,
        vector: FeatureVector,
        content_excerpt: str,
        previous_layout: Optional[Layout],
        slide_position: int,
        heuristic_decision: LayoutDecision,
    ) -> RefinementResult:
        """Ask for a better layout; never raises.

        Returns:
            RefinementResult holding the advisor's decision, or the
            heuristic decision unchanged with outcome ``fell_back``
        """
        try:
            prompt = build_prompt(
                vector,
                content_excerpt,
                previous_layout,
                slide_position,
                heuristic_decision,
                excerpt_length=self.config.excerpt_length,
            )
            reply = await self._complete(prompt)
            decision = parse_reply(reply)
        except Exception as exc:
            logger.warning(
                "Refinement failed for slide %d, falling back to heuristic (%s): %s",
                slide_position, heuristic_decision.layout.value, exc,
            )
            return RefinementResult(
                decision=heuristic_decision,
                outcome=RefinementOutcome.fell_back,
                error=str(exc),
            )

        logger.debug("Refined slide %d: %s", slide_position, decision.model_dump())
        return RefinementResult(decision=decision, outcome=RefinementOutcome.refined)

    async def select_layout(
        self,
        vector: FeatureVector,
        content: str,
        previous_layout: Optional[Layout],
        slide_position: int,
    ) -> RefinementResult:
        """Classify a slide, refining only when the heuristic is unsure."""
        heuristic = classify(vector, slide_position)

        if is_confident(heuristic):
            logger.debug("High confidence heuristic match for slide %d: %s",
                         slide_position, heuristic.model_dump())
            return RefinementResult(decision=heuristic, outcome=RefinementOutcome.skipped)

        return await self.refine(vector, content, previous_layout, slide_position, heuristic)
