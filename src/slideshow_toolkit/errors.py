"""Exception types raised by the slideshow toolkit."""


class SlideshowError(Exception):
    """Base class for toolkit errors."""


class FrontMatterError(SlideshowError):
    """A document's metadata block could not be parsed."""


class AdvisorUnavailableError(SlideshowError):
    """The refinement advisor cannot be constructed (e.g. no API key)."""


class DeckLoadError(SlideshowError):
    """A deck load was aborted; no partial deck is produced."""


class InvalidReplyError(SlideshowError):
    """A refinement reply held no usable layout decision."""
