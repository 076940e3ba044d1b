"""Data classes for the draw access layer tables"""

from dataclasses import dataclass, field
from typing import List, Optional

from tourney.draws.draw_models import EventGender, EventType, MatchStatus


@dataclass
class Player:
    """Data class for the player table (a pair for doubles events)"""

    id: str
    name: str
    club: Optional[str] = None
    partner_name: Optional[str] = None
    seed_number: Optional[int] = None  # Nullable column, None when not seeded

    @staticmethod
    def from_db_row(row):
        """Create a Player object from a database row"""
        return Player(
            id=row[0],
            name=row[1],
            club=row[2],
            partner_name=row[3],
            seed_number=row[4],
        )


@dataclass
class Score:
    """Two values per set, up to three sets. The number of sets won is never stored"""

    set1_player1: Optional[int] = None
    set1_player2: Optional[int] = None
    set2_player1: Optional[int] = None
    set2_player2: Optional[int] = None
    set3_player1: Optional[int] = None
    set3_player2: Optional[int] = None

    def sets(self) -> List[tuple[Optional[int], Optional[int]]]:
        """The score of each set as (player1, player2)"""
        return [
            (self.set1_player1, self.set1_player2),
            (self.set2_player1, self.set2_player2),
            (self.set3_player1, self.set3_player2),
        ]

    def is_empty(self) -> bool:
        """True when no value was entered"""
        return all(p1 is None and p2 is None for p1, p2 in self.sets())


@dataclass
class Match:
    """Data class for the tournament_match table"""

    id: str
    round: int
    match_number: int
    player1_id: Optional[str] = None
    player2_id: Optional[str] = None
    player1_name: Optional[str] = None
    player2_name: Optional[str] = None
    score: Optional[Score] = None
    winner_id: Optional[str] = None
    status: MatchStatus = MatchStatus.UPCOMING
    is_bye: bool = False

    @staticmethod
    def from_db_row(row):
        """Create a Match object from a database row"""
        score = Score(*row[7:13])
        return Match(
            id=row[0],
            round=row[1],
            match_number=row[2],
            player1_id=row[3],
            player2_id=row[4],
            player1_name=row[5],
            player2_name=row[6],
            score=None if score.is_empty() else score,
            winner_id=row[13],
            status=MatchStatus(row[14]),
            is_bye=bool(row[15]),  # Convert integer to boolean
        )


@dataclass
class EventCategory:
    """Data class for the event_category table, with its roster and its matches"""

    id: str
    tournament_id: str
    name: str
    event_type: EventType = EventType.SINGLES
    gender: EventGender = EventGender.ANY
    age_group: Optional[str] = None
    players: List[Player] = field(default_factory=list)
    seeds: List[str] = field(default_factory=list)  # Player ids, insertion order is the seed priority
    draw_generated: bool = False
    matches: List[Match] = field(default_factory=list)

    @staticmethod
    def from_db_row(row):
        """Create an EventCategory object from a database row, roster and matches are loaded separately"""
        return EventCategory(
            id=row[0],
            tournament_id=row[1],
            name=row[2],
            event_type=EventType(row[3]),
            gender=EventGender(row[4]),
            age_group=row[5],
            draw_generated=bool(row[6]),
        )

    def get_player(self, player_id: str) -> Optional[Player]:
        """Find a player of the roster by id"""
        return next((player for player in self.players if player.id == player_id), None)

    def get_match(self, match_id: str) -> Optional[Match]:
        """Find a match of the event by id"""
        return next((match for match in self.matches if match.id == match_id), None)
