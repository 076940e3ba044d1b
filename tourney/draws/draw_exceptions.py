"""Custom exceptions for the knockout draw"""


class DrawException(Exception):
    """Base exception for all draw-related errors"""


class InsufficientEntrantsError(DrawException):
    """Raised when a draw is requested with fewer than two entrants"""

    def __init__(self, entrant_count: int):
        super().__init__(f"Not enough entrants: at least 2 are required to generate a draw, got {entrant_count}.")
        self.entrant_count = entrant_count


class DrawAlreadyGeneratedError(DrawException):
    """Raised when a draw is generated again without asking for a redraw"""

    def __init__(self, event_id: str):
        super().__init__(f"The draw of the event {event_id} was already generated.")
        self.event_id = event_id


class InvalidSeedReferenceError(DrawException):
    """Raised in strict mode when a seed does not reference an entrant of the roster"""

    def __init__(self, seed_ids: list[str]):
        super().__init__(f"Seeds not found in the roster: {', '.join(seed_ids)}")
        self.seed_ids = seed_ids


class EventNotFoundError(DrawException):
    """Raised when the store has no event category for the given ids"""

    def __init__(self, tournament_id: str, event_id: str):
        super().__init__(f"The event {event_id} does not exist in the tournament {tournament_id}.")
        self.tournament_id = tournament_id
        self.event_id = event_id
