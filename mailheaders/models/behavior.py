"""Grammar behavior selection."""

from enum import Enum


class Behavior(Enum):
    """
    Which RFC 5322 grammar a parse call uses.

    STRICT accepts exactly the section 3 productions and fails on anything
    else. OBSOLETE adds the section 4 relaxations and returns whatever it
    could not consume as a remainder instead of failing.
    """

    STRICT = "strict"
    OBSOLETE = "obsolete"
