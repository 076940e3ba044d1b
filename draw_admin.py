#!/usr/bin/env python3
""" Entry file for the draw admin menu """
import random
import sys
from typing import List, Optional
from simple_term_menu import TerminalMenu
from tourney.draws.draw_data_access import SqliteTournamentStore, fetch_event_categories_by_tournament_id
from tourney.draws.draw_data_class import EventCategory, Match
from tourney.draws.draw_exceptions import DrawException
from tourney.draws.draw_functions import generate_draw_for_event
from tourney.log import print_error_log

store = SqliteTournamentStore()


def main():
    """First menu"""
    tournament_id = input("Tournament ID: ").strip()
    if tournament_id == "":
        sys.exit(0)
    event_menu(tournament_id)
    main()


def event_menu(tournament_id: str):
    """Select an event of the tournament"""
    events: List[EventCategory] = fetch_event_categories_by_tournament_id(tournament_id)
    if len(events) == 0:
        print(f"No event for the tournament {tournament_id}")
        return
    options = [f"[{i + 1}] {event.name}" for i, event in enumerate(events[:9])] + ["[q] Back"]
    terminal_menu = TerminalMenu(options, title="Events", show_shortcut_hints=True)
    menu_entry_index = terminal_menu.show()
    if menu_entry_index is None or menu_entry_index >= len(events[:9]):
        return
    draw_menu(tournament_id, events[menu_entry_index].id)
    event_menu(tournament_id)


def draw_menu(tournament_id: str, event_id: str):
    """Actions on the draw of an event"""
    options = [
        "[1] Show Draw",
        "[2] Generate Draw",
        "[3] Redraw",
        "[4] Redraw With Seed",
        "[q] Back",
    ]
    terminal_menu = TerminalMenu(options, title="Draw Actions", show_shortcut_hints=True)
    menu_entry_index = terminal_menu.show()
    if menu_entry_index == 0:
        show_draw(tournament_id, event_id)
    elif menu_entry_index == 1:
        generate_draw(tournament_id, event_id, False)
    elif menu_entry_index == 2:
        generate_draw(tournament_id, event_id, True)
    elif menu_entry_index == 3:
        rng_seed = input("Random seed: ").strip()
        generate_draw(tournament_id, event_id, True, random.Random(rng_seed))
    else:
        return
    draw_menu(tournament_id, event_id)


def generate_draw(
    tournament_id: str, event_id: str, allow_regenerate: bool, rng: Optional[random.Random] = None
) -> None:
    """Generate the draw and show it"""
    try:
        generate_draw_for_event(store, tournament_id, event_id, rng, allow_regenerate)
    except DrawException as e:
        print_error_log(f"draw_admin:generate_draw: {e}")
        return
    show_draw(tournament_id, event_id)


def format_match(match: Match) -> str:
    """One line per match, the winner is marked with a star"""
    player1 = f"{match.player1_name}{' *' if match.winner_id and match.winner_id == match.player1_id else ''}"
    player2 = f"{match.player2_name}{' *' if match.winner_id and match.winner_id == match.player2_id else ''}"
    return f"R{match.round} #{match.match_number:<3} {player1:<30} vs {player2:<30} {match.status.value}"


def show_draw(tournament_id: str, event_id: str) -> None:
    """Print the matches of the event"""
    event = store.get_event_category(tournament_id, event_id)
    if event is None or not event.draw_generated:
        print("The draw is not generated yet")
        return
    print(f"{event.name}: {len(event.players)} players")
    for match in event.matches:
        print(format_match(match))


if __name__ == "__main__":
    main()
