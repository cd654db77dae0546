"""Custom exceptions for configuration management."""

from tagger.errors import TaggerError


class ConfigError(TaggerError):
    """Raised when settings data cannot be processed."""
