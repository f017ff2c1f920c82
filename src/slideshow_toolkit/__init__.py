"""
Slideshow Toolkit

Turns a folder of Markdown documents into navigable presentation slides,
choosing one of twelve layout templates per slide from its structure, with
optional refinement by Claude for low-confidence picks.
"""

__version__ = "0.1.0"

from .config import (
    ToolkitConfig,
    load_config,
    save_config,
    create_minimal_config,
)

from .content import (
    Layout,
    FeatureVector,
    LayoutDecision,
    ParsedContent,
    SlideRecord,
    Deck,
    save_deck,
    load_deck_json,
    validate_deck_json,
)

from .analyze import (
    analyze,
    parse_markdown,
)

from .heuristics import (
    classify,
    HIGH_CONFIDENCE_THRESHOLD,
)

from .advisor import (
    RefinementAdvisor,
    RefinementResult,
    RefinementOutcome,
)

from .pipeline import (
    SlideSource,
    load_deck,
    discover_sources,
)

from .store import (
    DeckStore,
)

from .cookbook import (
    LayoutRecipe,
    COOKBOOK,
    get_recipe,
    list_recipes,
    build_deck_html,
)

from .diagnose import (
    diagnose_sources,
    DiagnosticReport,
)

from .errors import (
    SlideshowError,
    FrontMatterError,
    AdvisorUnavailableError,
    DeckLoadError,
)

__all__ = [
    # Config
    'ToolkitConfig',
    'load_config',
    'save_config',
    'create_minimal_config',
    # Deck model
    'Layout',
    'FeatureVector',
    'LayoutDecision',
    'ParsedContent',
    'SlideRecord',
    'Deck',
    'save_deck',
    'load_deck_json',
    'validate_deck_json',
    # Analysis
    'analyze',
    'parse_markdown',
    # Classification
    'classify',
    'HIGH_CONFIDENCE_THRESHOLD',
    'RefinementAdvisor',
    'RefinementResult',
    'RefinementOutcome',
    # Loading
    'SlideSource',
    'load_deck',
    'discover_sources',
    'DeckStore',
    # Cookbook
    'LayoutRecipe',
    'COOKBOOK',
    'get_recipe',
    'list_recipes',
    'build_deck_html',
    # Diagnostics
    'diagnose_sources',
    'DiagnosticReport',
    # Errors
    'SlideshowError',
    'FrontMatterError',
    'AdvisorUnavailableError',
    'DeckLoadError',
]
