"""Functions to manage the roster and the seeds of an event category"""

import uuid
from typing import Optional

from tourney.draws.draw_data_class import EventCategory, Player
from tourney.draws.draw_store import TournamentStore
from tourney.log import print_log
from tourney.models import Reason


def can_modify_roster(event: Optional[EventCategory]) -> Reason:
    """Check if players can still be added, removed or seeded"""
    if event is None:
        return Reason(False, "The event does not exist.")

    if event.draw_generated:
        return Reason(False, "The draw was already generated, the roster cannot change.")

    return Reason(True)


def _apply_seed(event: EventCategory, player: Player, seed_number: Optional[int]) -> None:
    """Keep the seeds list in sync with the seed number of the player"""
    if seed_number is not None and seed_number > 0:
        player.seed_number = seed_number
        if player.id not in event.seeds:
            event.seeds.append(player.id)
    else:
        player.seed_number = None
        event.seeds = [seed_id for seed_id in event.seeds if seed_id != player.id]


def add_player_to_event(
    store: TournamentStore,
    tournament_id: str,
    event_id: str,
    name: str,
    club: Optional[str] = None,
    partner_name: Optional[str] = None,
    seed_number: Optional[int] = None,
) -> Reason:
    """
    Register a player (or a pair for doubles) in the event.

    Returns:
        Reason: The new player is in the context when successful.
    """
    event = store.get_event_category(tournament_id, event_id)
    reason = can_modify_roster(event)
    if not reason.is_successful:
        return reason

    if not name or not name.strip():
        return Reason(False, "The player name is required.")

    player = Player(id=str(uuid.uuid4()), name=name.strip(), club=club, partner_name=partner_name)
    event.players.append(player)
    _apply_seed(event, player, seed_number)
    store.save_event_category(event)
    print_log(f"add_player_to_event: {player.name} ({player.id}) added to {event.name}")
    return Reason(True, None, player)


def remove_player_from_event(store: TournamentStore, tournament_id: str, event_id: str, player_id: str) -> Reason:
    """Remove a player from the roster and from the seeds"""
    event = store.get_event_category(tournament_id, event_id)
    reason = can_modify_roster(event)
    if not reason.is_successful:
        return reason

    player = event.get_player(player_id)
    if player is None:
        return Reason(False, "The player is not registered in the event.")

    event.players = [p for p in event.players if p.id != player_id]
    event.seeds = [seed_id for seed_id in event.seeds if seed_id != player_id]
    store.save_event_category(event)
    print_log(f"remove_player_from_event: {player.name} ({player.id}) removed from {event.name}")
    return Reason(True, None, player)


def set_player_seed(
    store: TournamentStore, tournament_id: str, event_id: str, player_id: str, seed_number: Optional[int]
) -> Reason:
    """
    Seed a player with a positive number, or unseed it with None or a number of 0 or less.
    A newly seeded player is appended to the seeds list.
    """
    event = store.get_event_category(tournament_id, event_id)
    reason = can_modify_roster(event)
    if not reason.is_successful:
        return reason

    player = event.get_player(player_id)
    if player is None:
        return Reason(False, "The player is not registered in the event.")

    _apply_seed(event, player, seed_number)
    store.save_event_category(event)
    return Reason(True, None, player)
