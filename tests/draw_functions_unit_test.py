"""
Knockout Draw Unit Tests using pytest
"""

import dataclasses
import random
from typing import List
from unittest.mock import patch
import pytest
from tourney.draws import draw_functions
from tourney.draws.draw_data_class import Match, Score
from tourney.draws.draw_exceptions import (
    DrawAlreadyGeneratedError,
    EventNotFoundError,
    InsufficientEntrantsError,
    InvalidSeedReferenceError,
)
from tourney.draws.draw_functions import (
    compute_sets_won,
    create_first_round_match,
    determine_winner_id,
    generate_draw_for_event,
    generate_knockout_draw,
    next_power_of_two,
    order_seeded_entrants,
    set_match_score,
)
from tourney.draws.draw_models import Entrant, MatchStatus
from tourney.draws.draw_store import InMemoryTournamentStore
from tests.mock_model import (
    EVENT_ID,
    TOURNAMENT_ID,
    mock_entrant_a,
    mock_entrant_b,
    mock_entrant_c,
    mock_entrant_d,
    mock_entrant_e,
    mock_entrants,
    mock_event,
)


def get_slots(matches: List[Match]) -> List[str]:
    """Flatten the matches into the list of slot ids"""
    return [player_id for match in matches for player_id in (match.player1_id, match.player2_id)]


def is_bye_id(player_id: str) -> bool:
    """Byes ids are prefixed"""
    return player_id.startswith("bye-")


def build_entrants(count: int) -> List[Entrant]:
    """Generate a roster of any size"""
    return [Entrant(id=f"p{i}", name=f"Player {i}") for i in range(count)]


@pytest.mark.parametrize("n,expected", [(0, 1), (1, 1), (2, 2), (3, 4), (4, 4), (5, 8), (8, 8), (9, 16), (33, 64)])
def test_next_power_of_two(n, expected):
    """Test the bracket size from the number of entrants"""
    assert next_power_of_two(n) == expected


def test_draw_four_players_no_seed():
    """Four entrants fill the bracket, two regular matches"""
    draw = generate_knockout_draw(mock_entrants[:4], [], random.Random(1))
    assert draw.bracket_size == 4
    assert draw.byes == 0
    assert len(draw.matches) == 2
    for match in draw.matches:
        assert match.status == MatchStatus.UPCOMING
        assert match.is_bye is False
        assert match.winner_id is None


def test_draw_three_players_one_bye():
    """Three entrants, the last one receives the bye"""
    draw = generate_knockout_draw(mock_entrants[:3], [], random.Random(1))
    assert draw.bracket_size == 4
    assert draw.byes == 1
    assert len(draw.matches) == 2
    bye_matches = [match for match in draw.matches if match.is_bye]
    assert len(bye_matches) == 1
    bye_match = bye_matches[0]
    assert bye_match.match_number == 2
    assert bye_match.status == MatchStatus.COMPLETED
    assert is_bye_id(bye_match.player2_id)
    assert bye_match.player2_name == "BYE"
    assert bye_match.winner_id == bye_match.player1_id
    assert not is_bye_id(bye_match.winner_id)
    assert draw.matches[0].status == MatchStatus.UPCOMING


def test_draw_five_players_two_seeds():
    """Seeds take the first slots, three byes for the three last entrants"""
    draw = generate_knockout_draw(mock_entrants[:5], [mock_entrant_a.id, mock_entrant_b.id], random.Random(1))
    assert draw.bracket_size == 8
    assert draw.byes == 3
    assert len(draw.matches) == 4
    assert draw.matches[0].player1_id == mock_entrant_a.id
    assert draw.matches[0].player2_id == mock_entrant_b.id
    assert draw.matches[0].is_bye is False
    bye_matches = [match for match in draw.matches if match.is_bye]
    assert len(bye_matches) == 3
    assert [match.match_number for match in bye_matches] == [2, 3, 4]
    for match in bye_matches:
        assert match.status == MatchStatus.COMPLETED
        assert match.winner_id == match.player1_id
        assert match.player1_id in {mock_entrant_c.id, mock_entrant_d.id, mock_entrant_e.id}


def test_draw_two_players():
    """The smallest bracket"""
    draw = generate_knockout_draw(mock_entrants[:2], [])
    assert draw.bracket_size == 2
    assert draw.byes == 0
    assert len(draw.matches) == 1
    assert draw.matches[0].status == MatchStatus.UPCOMING
    assert {draw.matches[0].player1_id, draw.matches[0].player2_id} == {mock_entrant_a.id, mock_entrant_b.id}


@pytest.mark.parametrize("count", [0, 1])
def test_draw_not_enough_players(count):
    """A single entrant is rejected before computing a bracket"""
    with pytest.raises(InsufficientEntrantsError) as error:
        generate_knockout_draw(mock_entrants[:count], [])
    assert error.value.entrant_count == count


def test_draw_bye_is_not_an_entrant():
    """A bye in the roster does not count toward the two entrants"""
    with pytest.raises(InsufficientEntrantsError) as error:
        generate_knockout_draw([mock_entrant_a, Entrant.bye(0)], [])
    assert error.value.entrant_count == 1


@pytest.mark.parametrize("count", range(2, 34))
def test_draw_properties_for_any_size(count):
    """Bracket size, match numbers, slots and byes for many roster sizes"""
    entrants = build_entrants(count)
    draw = generate_knockout_draw(entrants, ["p0", "p1"], random.Random(count))
    expected_size = next_power_of_two(count)
    assert draw.bracket_size == expected_size
    assert draw.byes == expected_size - count
    assert len(draw.matches) == expected_size // 2
    assert sorted(match.match_number for match in draw.matches) == list(range(1, expected_size // 2 + 1))
    assert all(match.round == 1 for match in draw.matches)

    slots = get_slots(draw.matches)
    real_slots = [slot for slot in slots if not is_bye_id(slot)]
    assert sorted(real_slots) == sorted(entrant.id for entrant in entrants)
    assert len(set(slots)) == len(slots)

    bye_matches = [match for match in draw.matches if match.is_bye]
    assert len(bye_matches) == expected_size - count
    for match in bye_matches:
        assert not (is_bye_id(match.player1_id) and is_bye_id(match.player2_id))
        assert match.status == MatchStatus.COMPLETED
        assert match.winner_id is not None and not is_bye_id(match.winner_id)
    for match in draw.matches:
        assert match.player1_id is not None and match.player2_id is not None
        if not match.is_bye:
            assert match.status == MatchStatus.UPCOMING
            assert match.winner_id is None


def test_draw_seed_number_has_priority_over_seeds_order():
    """An explicit seed number decides the rank"""
    entrant_a = dataclasses.replace(mock_entrant_a, seed_number=2)
    entrant_c = dataclasses.replace(mock_entrant_c, seed_number=1)
    players = [entrant_a, mock_entrant_b, entrant_c, mock_entrant_d]
    draw = generate_knockout_draw(players, [entrant_a.id, entrant_c.id])
    assert draw.matches[0].player1_id == entrant_c.id
    assert draw.matches[0].player2_id == entrant_a.id


def test_order_seeded_without_number_after_numbered_seeds():
    """Seeds without number keep the seeds list order, after the numbered ones"""
    entrant_b = dataclasses.replace(mock_entrant_b, seed_number=1)
    ordered = order_seeded_entrants(
        [mock_entrant_a, entrant_b, mock_entrant_c], [mock_entrant_c.id, mock_entrant_a.id, entrant_b.id]
    )
    assert [entrant.id for entrant in ordered] == [entrant_b.id, mock_entrant_c.id, mock_entrant_a.id]


def test_order_seeded_same_number_uses_seeds_order():
    """Ties on the seed number are broken by the seeds list"""
    entrant_a = dataclasses.replace(mock_entrant_a, seed_number=1)
    entrant_b = dataclasses.replace(mock_entrant_b, seed_number=1)
    ordered = order_seeded_entrants([entrant_a, entrant_b], [entrant_b.id, entrant_a.id])
    assert [entrant.id for entrant in ordered] == [entrant_b.id, entrant_a.id]


def test_draw_seeds_follow_seeds_list_order():
    """Without seed number, the first seeded in the list is the first slot"""
    draw = generate_knockout_draw(mock_entrants[:6], [mock_entrant_d.id, mock_entrant_b.id, mock_entrant_b.id])
    assert draw.matches[0].player1_id == mock_entrant_d.id
    assert draw.matches[0].player2_id == mock_entrant_b.id


@patch.object(draw_functions, draw_functions.print_warning_log.__name__)
def test_draw_unknown_seed_is_ignored(mock_print_warning_log):
    """A seed that is not in the roster does not take a slot"""
    draw = generate_knockout_draw(mock_entrants[:4], ["ghost", mock_entrant_c.id], random.Random(3))
    assert draw.bracket_size == 4
    assert draw.matches[0].player1_id == mock_entrant_c.id
    assert "ghost" not in get_slots(draw.matches)
    mock_print_warning_log.assert_called_once()


def test_draw_unknown_seed_strict():
    """In strict mode, a seed not in the roster is an error"""
    with pytest.raises(InvalidSeedReferenceError) as error:
        generate_knockout_draw(mock_entrants[:4], ["ghost"], strict_seeds=True)
    assert error.value.seed_ids == ["ghost"]


def test_draw_does_not_modify_inputs():
    """The roster and the seeds are left untouched"""
    players = list(mock_entrants[:7])
    seeds = [mock_entrant_e.id, mock_entrant_a.id]
    generate_knockout_draw(players, seeds, random.Random(5))
    assert players == list(mock_entrants[:7])
    assert seeds == [mock_entrant_e.id, mock_entrant_a.id]


def test_draw_same_random_seed_same_pairings():
    """An injected random source makes the draw reproducible"""
    draw1 = generate_knockout_draw(mock_entrants, [mock_entrant_a.id], random.Random(2024))
    draw2 = generate_knockout_draw(mock_entrants, [mock_entrant_a.id], random.Random(2024))
    assert get_slots(draw1.matches) == get_slots(draw2.matches)


def test_draw_unseeded_order_changes_but_not_seeds():
    """Repeated draws move the unseeded entrants, the seeds stay in place"""
    seeds = [mock_entrant_a.id, mock_entrant_b.id]
    orders = set()
    for i in range(20):
        draw = generate_knockout_draw(mock_entrants[:8], seeds, random.Random(i))
        slots = get_slots(draw.matches)
        assert slots[:2] == seeds
        assert len(draw.matches) == 4
        assert draw.byes == 0
        orders.add(tuple(slots[2:]))
    assert len(orders) > 1


def test_create_first_round_match_bye_first():
    """The winner of a bye match is the real entrant, whatever its side"""
    match = create_first_round_match(3, Entrant.bye(0), mock_entrant_a)
    assert match.is_bye is True
    assert match.status == MatchStatus.COMPLETED
    assert match.winner_id == mock_entrant_a.id
    assert match.match_number == 3
    assert match.round == 1


def test_create_first_round_match_two_byes():
    """No winner when both sides are byes"""
    match = create_first_round_match(1, Entrant.bye(0), Entrant.bye(1))
    assert match.is_bye is True
    assert match.status == MatchStatus.COMPLETED
    assert match.winner_id is None


def test_create_first_round_match_player_named_bye():
    """A real player called BYE is not a bye"""
    match = create_first_round_match(1, Entrant(id="p1", name="BYE"), mock_entrant_a)
    assert match.is_bye is False
    assert match.status == MatchStatus.UPCOMING


def test_generate_draw_for_event_saves_matches():
    """The draw is saved in the store with the flag"""
    store = InMemoryTournamentStore()
    event = mock_event(5)
    event.seeds = [event.players[4].id]
    store.save_event_category(event)

    draw = generate_draw_for_event(store, TOURNAMENT_ID, EVENT_ID, random.Random(7))

    saved = store.get_event_category(TOURNAMENT_ID, EVENT_ID)
    assert saved.draw_generated is True
    assert len(saved.matches) == 4
    assert [match.id for match in saved.matches] == [match.id for match in draw.matches]
    assert saved.matches[0].player1_id == event.players[4].id
    assert len(saved.players) == 5


def test_generate_draw_for_event_already_generated():
    """A second draw needs to be explicitly allowed"""
    store = InMemoryTournamentStore()
    store.save_event_category(mock_event(4))
    generate_draw_for_event(store, TOURNAMENT_ID, EVENT_ID)

    with pytest.raises(DrawAlreadyGeneratedError):
        generate_draw_for_event(store, TOURNAMENT_ID, EVENT_ID)


def test_generate_draw_for_event_redraw_replaces_matches():
    """A redraw replaces the previous matches, nothing accumulates"""
    store = InMemoryTournamentStore()
    store.save_event_category(mock_event(6))
    first_draw = generate_draw_for_event(store, TOURNAMENT_ID, EVENT_ID)
    second_draw = generate_draw_for_event(store, TOURNAMENT_ID, EVENT_ID, allow_regenerate=True)

    saved = store.get_event_category(TOURNAMENT_ID, EVENT_ID)
    assert len(saved.matches) == 4
    assert {match.id for match in saved.matches} == {match.id for match in second_draw.matches}
    assert not {match.id for match in saved.matches} & {match.id for match in first_draw.matches}


def test_generate_draw_for_event_not_enough_players():
    """The store is not touched when the roster is too small"""
    store = InMemoryTournamentStore()
    store.save_event_category(mock_event(1))

    with pytest.raises(InsufficientEntrantsError):
        generate_draw_for_event(store, TOURNAMENT_ID, EVENT_ID)

    saved = store.get_event_category(TOURNAMENT_ID, EVENT_ID)
    assert saved.draw_generated is False
    assert saved.matches == []


def test_generate_draw_for_event_missing_event():
    """Unknown event"""
    with pytest.raises(EventNotFoundError):
        generate_draw_for_event(InMemoryTournamentStore(), TOURNAMENT_ID, "unknown")


def test_compute_sets_won_three_sets():
    """Count each decided set"""
    score = Score(21, 15, 18, 21, 21, 19)
    assert compute_sets_won(score) == (2, 1)


def test_compute_sets_won_partial_score():
    """A set with a missing value and a tied set are not counted"""
    score = Score(21, 10, 20, None, 5, 5)
    assert compute_sets_won(score) == (1, 0)


def test_determine_winner_id():
    """The player with more sets wins, None when level"""
    match = Match(id="m1", round=1, match_number=1, player1_id="p1", player2_id="p2")
    assert determine_winner_id(match, Score(21, 10, 21, 12)) == "p1"
    assert determine_winner_id(match, Score(10, 21, 21, 12, 15, 21)) == "p2"
    assert determine_winner_id(match, Score(21, 10, 10, 21)) is None
    assert determine_winner_id(match, Score()) is None


def build_store_with_draw(player_count: int) -> InMemoryTournamentStore:
    """Store with a generated draw"""
    store = InMemoryTournamentStore()
    store.save_event_category(mock_event(player_count))
    generate_draw_for_event(store, TOURNAMENT_ID, EVENT_ID, random.Random(11))
    return store


def test_set_match_score_completes_match():
    """A consistent score is saved and completes the match"""
    store = build_store_with_draw(4)
    match = store.get_event_category(TOURNAMENT_ID, EVENT_ID).matches[0]
    score = Score(21, 15, 21, 17)

    reason = set_match_score(store, TOURNAMENT_ID, EVENT_ID, match.id, score, match.player1_id)

    assert reason.is_successful is True
    saved = store.get_event_category(TOURNAMENT_ID, EVENT_ID).get_match(match.id)
    assert saved.status == MatchStatus.COMPLETED
    assert saved.winner_id == match.player1_id
    assert saved.score == score


def test_set_match_score_winner_does_not_match_score():
    """The selected winner must agree with a decisive score"""
    store = build_store_with_draw(4)
    match = store.get_event_category(TOURNAMENT_ID, EVENT_ID).matches[0]

    reason = set_match_score(store, TOURNAMENT_ID, EVENT_ID, match.id, Score(21, 15, 21, 17), match.player2_id)

    assert reason.is_successful is False
    assert reason.text == "The selected winner does not match the score."
    saved = store.get_event_category(TOURNAMENT_ID, EVENT_ID).get_match(match.id)
    assert saved.status == MatchStatus.UPCOMING
    assert saved.score is None


def test_set_match_score_level_score_accepts_winner():
    """A retirement after one set each, the winner is chosen by the organizer"""
    store = build_store_with_draw(4)
    match = store.get_event_category(TOURNAMENT_ID, EVENT_ID).matches[1]

    reason = set_match_score(store, TOURNAMENT_ID, EVENT_ID, match.id, Score(21, 15, 10, 21), match.player2_id)

    assert reason.is_successful is True


def test_set_match_score_winner_not_in_match():
    """The winner must play the match"""
    store = build_store_with_draw(4)
    match = store.get_event_category(TOURNAMENT_ID, EVENT_ID).matches[0]

    reason = set_match_score(store, TOURNAMENT_ID, EVENT_ID, match.id, Score(21, 15), "someone-else")

    assert reason.is_successful is False
    assert reason.text == "The winner must be one of the two players of the match."


def test_set_match_score_bye_match():
    """A bye match is already completed"""
    store = build_store_with_draw(3)
    match = next(match for match in store.get_event_category(TOURNAMENT_ID, EVENT_ID).matches if match.is_bye)

    reason = set_match_score(store, TOURNAMENT_ID, EVENT_ID, match.id, Score(21, 0), match.player1_id)

    assert reason.is_successful is False
    assert reason.text == "A bye match cannot receive a score."


def test_set_match_score_unknown_match_and_event():
    """Unknown ids are reported"""
    store = build_store_with_draw(4)
    assert set_match_score(store, TOURNAMENT_ID, EVENT_ID, "unknown", Score(), "p1").text == "The match does not exist."
    assert set_match_score(store, TOURNAMENT_ID, "unknown", "unknown", Score(), "p1").text == "The event does not exist."
