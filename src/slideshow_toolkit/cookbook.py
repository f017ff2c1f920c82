"""
Slide Layout Cookbook

Region recipes for each of the twelve layouts, and the HTML builder that
arranges a slide's rendered Markdown into those regions. Visual styling is
left to the stylesheet; recipes only name regions and their column spans
on a 12-column grid.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from lxml import etree
from lxml import html as lxml_html

from .content import Deck, Layout, SlideRecord

GRID_COLUMNS = 12

_HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}

# Control characters lxml refuses in text and attribute values
_XML_UNSAFE_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


# ============================================================
# DATA CLASSES
# ============================================================

@dataclass
class RegionSpec:
    """A named region of a layout."""
    name: str
    role: str  # title, body, media
    columns: int = GRID_COLUMNS

    def __post_init__(self) -> None:
        if not 1 <= self.columns <= GRID_COLUMNS:
            raise ValueError(f"Region '{self.name}' spans {self.columns} columns (1-{GRID_COLUMNS})")


@dataclass
class LayoutRecipe:
    """A layout recipe: description plus the regions content is placed into."""
    layout: Layout
    description: str = ""
    regions: List[RegionSpec] = field(default_factory=list)
    centered: bool = False

    @property
    def name(self) -> str:
        return self.layout.value

    @property
    def css_class(self) -> str:
        return f"layout-{self.layout.value}"

    def regions_for(self, role: str) -> List[RegionSpec]:
        return [r for r in self.regions if r.role == role]


# ============================================================
# BUILT-IN RECIPES
# ============================================================

def _build_recipes() -> Dict[Layout, LayoutRecipe]:
    """Build the 12 built-in layout recipes."""
    recipes: Dict[Layout, LayoutRecipe] = {}

    # 1. Hero
    recipes[Layout.hero] = LayoutRecipe(
        layout=Layout.hero,
        description="Title slide with large heading and subtitle",
        regions=[
            RegionSpec("title", "title"),
            RegionSpec("subtitle", "body"),
        ],
        centered=True,
    )

    # 2. Section Break
    recipes[Layout.section_break] = LayoutRecipe(
        layout=Layout.section_break,
        description="Section divider with minimal content",
        regions=[
            RegionSpec("title", "title"),
            RegionSpec("caption", "body"),
        ],
        centered=True,
    )

    # 3. Content Left
    recipes[Layout.content_left] = LayoutRecipe(
        layout=Layout.content_left,
        description="Content aligned to the left",
        regions=[
            RegionSpec("title", "title"),
            RegionSpec("body", "body", columns=8),
        ],
    )

    # 4. Content Center
    recipes[Layout.content_center] = LayoutRecipe(
        layout=Layout.content_center,
        description="Content centered (default)",
        regions=[
            RegionSpec("title", "title"),
            RegionSpec("body", "body", columns=10),
        ],
        centered=True,
    )

    # 5. Two Column
    recipes[Layout.two_column] = LayoutRecipe(
        layout=Layout.two_column,
        description="Two-column layout for balanced content",
        regions=[
            RegionSpec("title", "title"),
            RegionSpec("col_left", "body", columns=6),
            RegionSpec("col_right", "body", columns=6),
        ],
    )

    # 6. Code Focus
    recipes[Layout.code_focus] = LayoutRecipe(
        layout=Layout.code_focus,
        description="Code-heavy slide with syntax highlighting",
        regions=[
            RegionSpec("title", "title"),
            RegionSpec("code", "body"),
        ],
    )

    # 7. Image + Text
    recipes[Layout.image_text] = LayoutRecipe(
        layout=Layout.image_text,
        description="Image with accompanying text",
        regions=[
            RegionSpec("title", "title"),
            RegionSpec("media", "media", columns=6),
            RegionSpec("body", "body", columns=6),
        ],
    )

    # 8. List Emphasize
    recipes[Layout.list_emphasize] = LayoutRecipe(
        layout=Layout.list_emphasize,
        description="Bullet points or numbered lists",
        regions=[
            RegionSpec("title", "title"),
            RegionSpec("list", "body", columns=10),
        ],
    )

    # 9. Quote
    recipes[Layout.quote] = LayoutRecipe(
        layout=Layout.quote,
        description="Prominent quotation or testimonial",
        regions=[
            RegionSpec("title", "title"),
            RegionSpec("quote", "body", columns=10),
        ],
        centered=True,
    )

    # 10. Comparison
    recipes[Layout.comparison] = LayoutRecipe(
        layout=Layout.comparison,
        description="Side-by-side comparison or table",
        regions=[
            RegionSpec("title", "title"),
            RegionSpec("table", "body"),
        ],
    )

    # 11. Timeline
    recipes[Layout.timeline] = LayoutRecipe(
        layout=Layout.timeline,
        description="Sequential events or process steps",
        regions=[
            RegionSpec("title", "title"),
            RegionSpec("track", "body"),
        ],
    )

    # 12. Diagram
    recipes[Layout.diagram] = LayoutRecipe(
        layout=Layout.diagram,
        description="Visual diagram or flowchart",
        regions=[
            RegionSpec("title", "title"),
            RegionSpec("figure", "media", columns=8),
            RegionSpec("notes", "body", columns=4),
        ],
    )

    return recipes


# Global recipe registry
COOKBOOK: Dict[Layout, LayoutRecipe] = _build_recipes()


def get_recipe(layout: Union[Layout, str]) -> Optional[LayoutRecipe]:
    """Get a layout recipe by layout or layout name. Returns None if not found."""
    parsed = Layout.parse(layout)
    if parsed is None:
        return None
    return COOKBOOK.get(parsed)


def list_recipes() -> List[str]:
    """Return all registered layout names."""
    return [layout.value for layout in COOKBOOK]


# ============================================================
# HTML GENERATION
# ============================================================

def _fragments(slide_html: str) -> List[etree._Element]:
    """Parse rendered slide HTML into top-level elements."""
    if not slide_html.strip():
        return []
    elements = []
    for frag in lxml_html.fragments_fromstring(slide_html):
        if isinstance(frag, str):
            # Bare leading text
            if frag.strip():
                p = etree.Element("p")
                p.text = frag
                elements.append(p)
        else:
            elements.append(frag)
    return elements


def _is_media(elem: etree._Element) -> bool:
    """True for an <img> or a paragraph holding nothing but images."""
    if elem.tag == "img":
        return True
    if elem.tag != "p" or (elem.text or "").strip():
        return False
    children = list(elem)
    return bool(children) and all(
        c.tag in ("img", "br") and not (c.tail or "").strip() for c in children
    )


def _split_evenly(items: Sequence[etree._Element], parts: int) -> List[List[etree._Element]]:
    """Split items into `parts` consecutive chunks, earlier chunks larger."""
    size, extra = divmod(len(items), parts)
    chunks = []
    start = 0
    for i in range(parts):
        end = start + size + (1 if i < extra else 0)
        chunks.append(list(items[start:end]))
        start = end
    return chunks


def _xml_safe(value: str) -> str:
    return _XML_UNSAFE_RE.sub("", value)


def _region_elem(region: RegionSpec, children: Sequence[etree._Element]) -> etree._Element:
    div = etree.Element("div")
    div.set("class", f"region region-{region.name}")
    div.set("data-role", region.role)
    div.set("data-columns", str(region.columns))
    for child in children:
        div.append(child)
    return div


def build_slide_html(record: SlideRecord, recipe: Optional[LayoutRecipe] = None) -> etree._Element:
    """Arrange a slide's rendered HTML into the regions of its layout.

    The first heading goes to the title region, image-only paragraphs go
    to media regions (when the layout has any), and everything else is
    split in order across the body regions.

    Args:
        record: The slide to render
        recipe: Override recipe; defaults to the recipe for the slide's layout

    Returns:
        A <section> element for the slide
    """
    recipe = recipe or COOKBOOK[record.layout]

    title_regions = recipe.regions_for("title")
    media_regions = recipe.regions_for("media")
    body_regions = recipe.regions_for("body")

    title: List[etree._Element] = []
    media: List[etree._Element] = []
    body: List[etree._Element] = []

    for elem in _fragments(_xml_safe(record.content.html)):
        if title_regions and not title and elem.tag in _HEADING_TAGS:
            title.append(elem)
        elif media_regions and _is_media(elem):
            media.append(elem)
        else:
            body.append(elem)

    section = etree.Element("section")
    classes = ["slide", recipe.css_class]
    if recipe.centered:
        classes.append("centered")
    section.set("class", " ".join(classes))
    section.set("id", f"slide-{record.index + 1}")
    section.set("data-index", str(record.index))
    section.set("data-layout", recipe.name)
    section.set("data-source", _xml_safe(record.source))
    section.set("data-reasoning", _xml_safe(record.reasoning))

    assigned = {}
    for region, chunk in zip(title_regions, [title]):
        assigned[region.name] = chunk
    for region, chunk in zip(media_regions, _split_evenly(media, len(media_regions) or 1)):
        assigned[region.name] = chunk
    if body_regions:
        for region, chunk in zip(body_regions, _split_evenly(body, len(body_regions))):
            assigned[region.name] = chunk

    for region in recipe.regions:
        section.append(_region_elem(region, assigned.get(region.name, [])))

    return section


def build_deck_html(deck: Deck, title: str = "Slideshow", stylesheet: Optional[str] = None) -> str:
    """Build a standalone HTML document containing every slide of a deck."""
    root = etree.Element("html")
    root.set("lang", "en")
    head = etree.SubElement(root, "head")
    meta = etree.SubElement(head, "meta")
    meta.set("charset", "utf-8")
    title_elem = etree.SubElement(head, "title")
    title_elem.text = _xml_safe(title)
    if stylesheet:
        link = etree.SubElement(head, "link")
        link.set("rel", "stylesheet")
        link.set("href", _xml_safe(stylesheet))

    body = etree.SubElement(root, "body")
    main = etree.SubElement(body, "main")
    main.set("class", "deck")
    main.set("data-slide-count", str(len(deck.slides)))
    for record in deck.slides:
        main.append(build_slide_html(record))

    return etree.tostring(root, method="html", encoding="unicode", doctype="<!DOCTYPE html>")
