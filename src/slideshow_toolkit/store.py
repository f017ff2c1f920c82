"""
Deck Store

Explicit state container for the presentation layer: the loaded slides,
the current position, a loading flag and the last error. State only changes
through load, navigation and reset; a load replaces the deck wholesale.
"""

from typing import Callable, Iterable, List, Optional, Tuple

from .advisor import RefinementAdvisor
from .config import ToolkitConfig
from .content import Deck, SlideRecord
from .errors import DeckLoadError
from .pipeline import AdvisorFactory, SourceLike, load_deck

Listener = Callable[["DeckStore"], None]


class DeckStore:
    """Holds the current deck and navigation position.

    Loads are not guarded against overlap; callers serialize them (e.g. by
    disabling the trigger while ``is_loading`` is true).
    """

    def __init__(
        self,
        config: Optional[ToolkitConfig] = None,
        advisor_factory: Optional[AdvisorFactory] = RefinementAdvisor,
    ):
        self._config = config
        self._advisor_factory = advisor_factory
        self._listeners: List[Listener] = []
        self._deck: Optional[Deck] = None
        self.current_index = 0
        self.is_loading = False
        self.error: Optional[str] = None

    # --- read access -------------------------------------------------

    @property
    def deck(self) -> Optional[Deck]:
        return self._deck

    @property
    def slides(self) -> Tuple[SlideRecord, ...]:
        return self._deck.slides if self._deck else ()

    @property
    def current(self) -> Optional[SlideRecord]:
        slides = self.slides
        return slides[self.current_index] if slides else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # --- operations --------------------------------------------------

    async def load(self, sources: Iterable[SourceLike]) -> bool:
        """Load a new deck, replacing the current one.

        Returns:
            True on success; on failure the deck is cleared and ``error`` set
        """
        self.is_loading = True
        self.error = None
        self._notify()

        try:
            deck = await load_deck(sources, config=self._config, advisor_factory=self._advisor_factory)
        except DeckLoadError as exc:
            self._deck = None
            self.current_index = 0
            self.is_loading = False
            self.error = str(exc)
            self._notify()
            return False

        self._deck = deck
        self.current_index = 0
        self.is_loading = False
        self._notify()
        return True

    def next_slide(self) -> None:
        if self.current_index < len(self.slides) - 1:
            self.current_index += 1
            self._notify()

    def previous_slide(self) -> None:
        if self.current_index > 0:
            self.current_index -= 1
            self._notify()

    def go_to_slide(self, index: int) -> None:
        if 0 <= index < len(self.slides) and index != self.current_index:
            self.current_index = index
            self._notify()

    def reset(self) -> None:
        self._deck = None
        self.current_index = 0
        self.is_loading = False
        self.error = None
        self._notify()
