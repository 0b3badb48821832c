"""Exception hierarchy for goi-enrich."""


class IndexBuildError(Exception):
    """Raised when a required dictionary input is missing or unreadable."""
    pass


class EnrichmentError(Exception):
    """Base class for per-word failures that skip the word, not the batch."""
    pass


class WordNotFoundError(EnrichmentError, LookupError):
    """Raised when a word matches neither a spelling nor a reading."""
    pass


class UnusableWordError(EnrichmentError, ValueError):
    """Raised when every sense of a word is filtered out at its level."""
    pass
