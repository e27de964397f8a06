from .normalizer import DomainNormalizationError, to_ascii_compatible

__all__ = ["DomainNormalizationError", "to_ascii_compatible"]
