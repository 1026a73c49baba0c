class ResolverError(Exception):
    """Base exception for resolution failures."""


class ConfigError(ResolverError):
    """Raised when configuration cannot be loaded."""


class EvidenceFormatError(ResolverError):
    """Raised when an evidence document has the wrong overall shape."""


class ClusteringError(ResolverError):
    """Raised when numerical clustering fails."""


class UnknownStrategyError(ResolverError):
    """Raised for an unregistered clustering strategy name."""
