"""
Repository used by the draw to read an event category and save its matches
"""

from abc import ABC, abstractmethod
import copy
from typing import Dict, List, Optional, Tuple

from tourney.draws.draw_data_class import EventCategory, Match
from tourney.draws.draw_exceptions import EventNotFoundError


class TournamentStore(ABC):
    """Persistence of the event categories, the draw does not know which technology is behind it"""

    @abstractmethod
    def get_event_category(self, tournament_id: str, event_id: str) -> Optional[EventCategory]:
        """Get the event with its roster, seeds and matches. None if it does not exist"""

    @abstractmethod
    def replace_matches(
        self, tournament_id: str, event_id: str, matches: List[Match], draw_generated: bool = True
    ) -> None:
        """
        Replace all the matches of the event and set the draw flag in a single operation.
        The previous matches are never merged with the new ones.
        """

    @abstractmethod
    def save_event_category(self, event_category: EventCategory) -> None:
        """Insert or update the event with its roster and seeds"""

    @abstractmethod
    def update_match(self, tournament_id: str, event_id: str, match: Match) -> None:
        """Replace a single match, found by its id"""


class InMemoryTournamentStore(TournamentStore):
    """Keep the events in a dictionary, copies are returned to avoid sharing the stored objects"""

    def __init__(self):
        self.events: Dict[Tuple[str, str], EventCategory] = {}

    def get_event_category(self, tournament_id: str, event_id: str) -> Optional[EventCategory]:
        event = self.events.get((tournament_id, event_id))
        return copy.deepcopy(event) if event is not None else None

    def replace_matches(
        self, tournament_id: str, event_id: str, matches: List[Match], draw_generated: bool = True
    ) -> None:
        event = self._get_stored_event(tournament_id, event_id)
        event.matches = copy.deepcopy(matches)
        event.draw_generated = draw_generated

    def save_event_category(self, event_category: EventCategory) -> None:
        key = (event_category.tournament_id, event_category.id)
        existing = self.events.get(key)
        stored = copy.deepcopy(event_category)
        if existing is not None:
            # Matches and the draw flag are only changed by replace_matches and update_match
            stored.matches = existing.matches
            stored.draw_generated = existing.draw_generated
        self.events[key] = stored

    def update_match(self, tournament_id: str, event_id: str, match: Match) -> None:
        event = self._get_stored_event(tournament_id, event_id)
        for i, existing in enumerate(event.matches):
            if existing.id == match.id:
                event.matches[i] = copy.deepcopy(match)
                return
        raise KeyError(f"Match {match.id} not found in event {event_id}")

    def _get_stored_event(self, tournament_id: str, event_id: str) -> EventCategory:
        event = self.events.get((tournament_id, event_id))
        if event is None:
            raise EventNotFoundError(tournament_id, event_id)
        return event
