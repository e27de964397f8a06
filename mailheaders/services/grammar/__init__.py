"""RFC 5322 structured header grammar"""

from .base import Gap, GrammarFailure, HeaderParseError, ResourceLimitExceeded
from .selector import GRAMMARS, ObsoleteGrammar, StrictGrammar, grammar_for

__all__ = [
    "GRAMMARS",
    "Gap",
    "GrammarFailure",
    "HeaderParseError",
    "ObsoleteGrammar",
    "ResourceLimitExceeded",
    "StrictGrammar",
    "grammar_for",
]
