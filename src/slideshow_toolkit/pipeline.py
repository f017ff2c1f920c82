"""
Deck Loading Pipeline

Turns an ordered set of Markdown documents into a Deck. Documents are
processed strictly in order: the layout chosen for slide i is handed to
the advisor as context for slide i+1. Any error aborts the whole load and
no partial deck escapes.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Union

from .advisor import RefinementAdvisor
from .analyze import analyze, parse_markdown
from .config import ToolkitConfig, load_config
from .content import Deck, Layout, LayoutDecision, SlideRecord
from .errors import DeckLoadError
from .heuristics import classify

logger = logging.getLogger(__name__)

MANUAL_REASONING = "Manually specified in frontmatter"
BASIC_FALLBACK_REASONING = "Basic heuristic fallback (AI unavailable)"

MARKDOWN_SUFFIXES = (".md", ".markdown")


@dataclass(frozen=True)
class SlideSource:
    """A raw Markdown document and the name it is ordered by."""
    name: str
    text: str


SourceLike = Union[SlideSource, Path, str]
AdvisorFactory = Callable[[ToolkitConfig], RefinementAdvisor]


def natural_sort_key(name: str) -> Tuple:
    """Sort key placing '2-intro.md' before '10-outro.md'."""
    parts = re.split(r"(\d+)", name)
    key = tuple(int(p) if p.isdigit() else p.lower() for p in parts)
    return (key, name)


def _source_name(source: SourceLike) -> str:
    if isinstance(source, SlideSource):
        return source.name
    return Path(source).name


def discover_sources(directory: Union[str, Path]) -> List[Path]:
    """List the Markdown files in a directory, in deck order."""
    directory = Path(directory)
    if not directory.is_dir():
        raise DeckLoadError(f"Not a directory: {directory}")
    files = [p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in MARKDOWN_SUFFIXES]
    return sorted(files, key=lambda p: natural_sort_key(p.name))


async def _read_source(source: SourceLike) -> SlideSource:
    if isinstance(source, SlideSource):
        return source
    path = Path(source)
    text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    return SlideSource(name=path.name, text=text)


def _create_advisor(
    factory: Optional[AdvisorFactory],
    config: ToolkitConfig,
) -> Optional[RefinementAdvisor]:
    if factory is None:
        logger.info("Layout refinement disabled; using heuristics only")
        return None
    try:
        return factory(config)
    except Exception as exc:
        logger.info("Layout refinement unavailable, using heuristic fallback: %s", exc)
        return None


@dataclass(frozen=True)
class _Accumulator:
    """State threaded from one slide to the next."""
    slides: Tuple[SlideRecord, ...] = ()
    previous_layout: Optional[Layout] = None


async def _build_slide(
    acc: _Accumulator,
    source: SourceLike,
    advisor: Optional[RefinementAdvisor],
) -> _Accumulator:
    index = len(acc.slides)
    doc = await _read_source(source)
    content = parse_markdown(doc.text)
    features = analyze(content.raw_markdown)
    refined = False

    override = content.layout_override
    manual = Layout.parse(override) if override is not None else None
    if override is not None and manual is None:
        logger.warning("Ignoring unknown layout %r in front matter of %s", override, doc.name)

    if manual is not None:
        decision = LayoutDecision(layout=manual, reasoning=MANUAL_REASONING, confidence=1.0)
        reasoning = MANUAL_REASONING
    elif advisor is not None:
        result = await advisor.select_layout(
            features, content.raw_markdown, acc.previous_layout, index,
        )
        decision = result.decision
        reasoning = decision.reasoning
        refined = result.refined
    else:
        decision = classify(features, index)
        reasoning = BASIC_FALLBACK_REASONING

    record = SlideRecord(
        source=doc.name,
        content=content,
        features=features,
        decision=decision,
        reasoning=reasoning,
        index=index,
        refined=refined,
    )
    logger.debug("Slide %d (%s): %s [%.2f] %s",
                 index, doc.name, decision.layout.value, decision.confidence, reasoning)

    return _Accumulator(slides=acc.slides + (record,), previous_layout=decision.layout)


async def load_deck(
    sources: Iterable[SourceLike],
    config: Optional[ToolkitConfig] = None,
    advisor_factory: Optional[AdvisorFactory] = RefinementAdvisor,
) -> Deck:
    """Build a deck from Markdown documents.

    Args:
        sources: SlideSource objects or paths to Markdown files, in any order
        config: Toolkit configuration; loaded from the environment if omitted
        advisor_factory: Builds the refinement advisor once per load; pass
            None to run on heuristics alone

    Returns:
        Deck with one SlideRecord per source, in natural name order

    Raises:
        DeckLoadError: If any source cannot be read or parsed
    """
    config = config or load_config()
    ordered = sorted(sources, key=lambda s: natural_sort_key(_source_name(s)))
    advisor = _create_advisor(advisor_factory, config)

    acc = _Accumulator()
    try:
        for source in ordered:
            acc = await _build_slide(acc, source, advisor)
    except Exception as exc:
        logger.error("Failed to load slides: %s", exc)
        raise DeckLoadError(f"Failed to load slides: {exc}") from exc

    logger.info("Loaded %d slides (refinement %s)",
                len(acc.slides), "enabled" if advisor else "disabled")
    return Deck(slides=acc.slides, refinement_enabled=advisor is not None)
