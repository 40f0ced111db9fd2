"""
Exception hierarchy for the fol_eq outer layers.

The decision procedure itself is total and raises nothing for well-formed
terms; these errors come from term decoding, problem loading and config.
"""


class FolEqError(Exception):
    """Base class for all fol_eq errors."""
    pass


class TermFormatError(FolEqError, ValueError):
    """Raised when a serialized term does not match the term schema."""
    pass


class ProblemLoadError(FolEqError):
    """Raised when a problem file is missing or malformed."""
    pass


class ConfigError(FolEqError, ValueError):
    """Raised when engine configuration values are invalid."""
    pass
