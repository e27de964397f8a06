from .resolver import BUILTIN_ALIASES, CharsetResolver

__all__ = ["BUILTIN_ALIASES", "CharsetResolver"]
