"""Exception hierarchy shared across Tagger packages."""


class TaggerError(Exception):
    """Base exception for tag resolution failures."""


class DeclarationParseError(TaggerError):
    """Raised when a sidecar file does not describe a list of tag rules."""


class ResolutionError(TaggerError):
    """Raised when a root directory cannot be read during resolution."""


__all__ = ["TaggerError", "DeclarationParseError", "ResolutionError"]
