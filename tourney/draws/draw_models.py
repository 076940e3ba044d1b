""" Model for the knockout draw feature """

from __future__ import annotations
import dataclasses
from enum import Enum
from typing import List, Optional, TYPE_CHECKING

from tourney.values import BYE_ID_PREFIX, BYE_NAME

if TYPE_CHECKING:
    from tourney.draws.draw_data_class import Match


class MatchStatus(Enum):
    """Represents the state of a match"""

    UPCOMING = "Upcoming"
    LIVE = "Live"
    COMPLETED = "Completed"
    WALKOVER = "Walkover"
    RETIRED = "Retired"


class EventType(Enum):
    """Singles or doubles event"""

    SINGLES = "Singles"
    DOUBLES = "Doubles"


class EventGender(Enum):
    """Gender of an event category, 'Any' is used for age categories like U13"""

    MEN = "Men"
    WOMEN = "Women"
    MIXED = "Mixed"
    ANY = "Any"


@dataclasses.dataclass(frozen=True)
class Entrant:
    """
    Occupies one slot of the bracket
    Either a registered player or a bye placeholder that only lives while the bracket is built
    """

    id: str
    name: str
    seed_number: Optional[int] = None
    is_bye: bool = False

    @staticmethod
    def bye(index: int) -> Entrant:
        """Create the placeholder for the index-th bye of a draw"""
        return Entrant(id=f"{BYE_ID_PREFIX}{index}", name=BYE_NAME, is_bye=True)


@dataclasses.dataclass
class DrawResult:
    """Round 1 of a knockout draw"""

    matches: List[Match]
    bracket_size: int
    byes: int
