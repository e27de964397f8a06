"""Assemble the strict and obsolete grammars from the rule mixins."""

from typing import Optional, Union

from mailheaders.config.parser_config import ParserConfig
from mailheaders.models.behavior import Behavior

from .addresses import AddressRules, ObsoleteAddressRules
from .base import GrammarBase
from .date_time import DateTimeRules, ObsoleteDateTimeRules
from .message_id import MessageIdRules, ObsoleteMessageIdRules
from .mime_parameters import MimeParameterRules, ObsoleteMimeParameterRules
from .tokens import ObsoleteTokenRules, TokenRules
from .unstructured import ObsoleteUnstructuredRules, UnstructuredRules


class StrictGrammar(
    MimeParameterRules, UnstructuredRules, DateTimeRules, MessageIdRules, AddressRules, TokenRules
):
    """RFC 5322 section 3 only. Leftover input is an error."""

    behavior = Behavior.STRICT


class ObsoleteGrammar(
    ObsoleteMimeParameterRules,
    ObsoleteUnstructuredRules,
    ObsoleteDateTimeRules,
    ObsoleteMessageIdRules,
    ObsoleteAddressRules,
    ObsoleteTokenRules,
    StrictGrammar,
):
    """
    RFC 5322 section 3 plus the section 4 obsolete syntax.

    Accepts everything the strict grammar accepts, with the same values.
    Input it cannot use is returned as a remainder instead of failing.
    """

    behavior = Behavior.OBSOLETE


GRAMMARS = {
    Behavior.STRICT: StrictGrammar,
    Behavior.OBSOLETE: ObsoleteGrammar,
}


def grammar_for(behavior: Union[Behavior, str], config: Optional[ParserConfig] = None) -> GrammarBase:
    """
    Create a grammar for one parse call.

    Args:
        behavior: ``Behavior`` or its value ("strict" / "obsolete")
        config: Parser configuration; defaults apply when omitted

    Returns:
        A fresh grammar object

    Raises:
        ValueError: If behavior is not a known mode
    """
    return GRAMMARS[Behavior(behavior)](config)
