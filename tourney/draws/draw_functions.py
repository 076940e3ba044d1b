"""Functions used to generate the knockout draw of an event category and record its scores"""

import random
import uuid
from typing import Iterable, List, Optional, Sequence

from tourney.draws.draw_data_class import EventCategory, Match, Score
from tourney.draws.draw_exceptions import (
    DrawAlreadyGeneratedError,
    EventNotFoundError,
    InsufficientEntrantsError,
    InvalidSeedReferenceError,
)
from tourney.draws.draw_mapper import map_players_to_entrants
from tourney.draws.draw_models import DrawResult, Entrant, MatchStatus
from tourney.draws.draw_store import TournamentStore
from tourney.log import print_debug_log, print_log, print_warning_log
from tourney.models import Reason
from tourney.values import FIRST_ROUND, MIN_ENTRANTS


def next_power_of_two(n: int) -> int:
    """
    Size of the smallest bracket holding n entrants: 1 when there is nobody, n itself when n is a power of two.
    """
    if n <= 0:
        return 1
    return 1 << (n - 1).bit_length()


def order_seeded_entrants(seeded: List[Entrant], seeds: List[str]) -> List[Entrant]:
    """
    Order the seeded entrants by rank.

    The rank is the explicit seed number. A seeded entrant without a seed number is ranked after every
    numbered seed, in the order of the seeds list. The seeds list order also breaks ties between equal numbers.
    """
    position = {seed_id: i for i, seed_id in enumerate(seeds)}

    def rank(entrant: Entrant) -> tuple[bool, int, int]:
        return (entrant.seed_number is None, entrant.seed_number or 0, position.get(entrant.id, len(seeds)))

    return sorted(seeded, key=rank)


def create_first_round_match(match_number: int, entrant1: Entrant, entrant2: Entrant) -> Match:
    """
    Create a round 1 match. When one side is a bye, the match is already completed and won by the other side.
    """
    match = Match(
        id=str(uuid.uuid4()),
        round=FIRST_ROUND,
        match_number=match_number,
        player1_id=entrant1.id,
        player2_id=entrant2.id,
        player1_name=entrant1.name,
        player2_name=entrant2.name,
        status=MatchStatus.UPCOMING,
        is_bye=entrant1.is_bye or entrant2.is_bye,
    )
    if match.is_bye:
        match.status = MatchStatus.COMPLETED
        if not entrant1.is_bye:
            match.winner_id = entrant1.id
        elif not entrant2.is_bye:
            match.winner_id = entrant2.id
    return match


def generate_knockout_draw(
    players: Sequence[Entrant],
    seeds: Iterable[str],
    rng: Optional[random.Random] = None,
    strict_seeds: bool = False,
) -> DrawResult:
    """
    Generate the first round of a single elimination bracket.

    Seeded entrants take the first slots by rank, the other entrants are shuffled after them and
    byes pad the end of the bracket up to the next power of two. Slots are then paired sequentially,
    the last entrants of the list are the ones receiving a bye.

    Args:
        players (Sequence[Entrant]): The roster, at least two entrants. Never modified.
        seeds (Iterable[str]): The seeded ids, in priority order. Ids not in the roster are ignored.
        rng (Optional[random.Random]): Source of the shuffle, give a seeded one for a reproducible draw.
        strict_seeds (bool): Raise instead of ignoring the seeds that are not in the roster.

    Returns:
        DrawResult: The round 1 matches, the bracket size and the number of byes.
    """
    real_entrant_count = sum(1 for player in players if not player.is_bye)
    if real_entrant_count < MIN_ENTRANTS:
        raise InsufficientEntrantsError(real_entrant_count)
    if rng is None:
        rng = random.Random()

    seed_ids = list(dict.fromkeys(seeds))  # Remove duplicates, keep the priority order
    roster_ids = {player.id for player in players}
    unknown_seeds = [seed_id for seed_id in seed_ids if seed_id not in roster_ids]
    if len(unknown_seeds) > 0:
        if strict_seeds:
            raise InvalidSeedReferenceError(unknown_seeds)
        print_warning_log(f"generate_knockout_draw: Ignoring seeds not in the roster: {', '.join(unknown_seeds)}")

    seed_set = set(seed_ids)
    seeded = [player for player in players if player.id in seed_set]
    unseeded = [player for player in players if player.id not in seed_set]
    rng.shuffle(unseeded)
    ordered = order_seeded_entrants(seeded, seed_ids) + unseeded

    bracket_size = next_power_of_two(len(ordered))
    byes = bracket_size - len(ordered)

    # Byes stay at the tail, each one facing one of the last entrants so two byes never meet
    paired_count = len(ordered) - byes
    padded = ordered[:paired_count]
    for i, entrant in enumerate(ordered[paired_count:]):
        padded += [entrant, Entrant.bye(i)]

    matches = [
        create_first_round_match(i + 1, padded[i * 2], padded[i * 2 + 1]) for i in range(bracket_size // 2)
    ]
    for match in matches:
        print_debug_log(
            f"generate_knockout_draw: Match {match.match_number}: {match.player1_name} vs {match.player2_name}"
        )
    return DrawResult(matches=matches, bracket_size=bracket_size, byes=byes)


def generate_draw_for_event(
    store: TournamentStore,
    tournament_id: str,
    event_id: str,
    rng: Optional[random.Random] = None,
    allow_regenerate: bool = False,
) -> DrawResult:
    """
    Generate the draw of an event and save it. A redraw must be explicitly allowed and fully replaces
    the previous matches.
    """
    event: Optional[EventCategory] = store.get_event_category(tournament_id, event_id)
    if event is None:
        raise EventNotFoundError(tournament_id, event_id)

    if event.draw_generated and not allow_regenerate:
        raise DrawAlreadyGeneratedError(event_id)

    if len(event.players) < MIN_ENTRANTS:
        raise InsufficientEntrantsError(len(event.players))

    draw = generate_knockout_draw(map_players_to_entrants(event.players), event.seeds, rng)
    store.replace_matches(tournament_id, event_id, draw.matches, draw_generated=True)
    print_log(
        f"generate_draw_for_event: Draw for {event.name} ({event_id}) with {len(event.players)} players, "
        f"bracket of {draw.bracket_size} and {draw.byes} byes"
    )
    return draw


def compute_sets_won(score: Score) -> tuple[int, int]:
    """
    Count the sets won by each player. A set counts only when both values are entered, a tied set counts for nobody.
    """
    player1_sets = 0
    player2_sets = 0
    for player1_points, player2_points in score.sets():
        if player1_points is None or player2_points is None:
            continue
        if player1_points > player2_points:
            player1_sets += 1
        elif player2_points > player1_points:
            player2_sets += 1
    return (player1_sets, player2_sets)


def determine_winner_id(match: Match, score: Score) -> Optional[str]:
    """The player with the most sets, None when the sets are level"""
    player1_sets, player2_sets = compute_sets_won(score)
    if player1_sets > player2_sets:
        return match.player1_id
    if player2_sets > player1_sets:
        return match.player2_id
    return None


def set_match_score(
    store: TournamentStore, tournament_id: str, event_id: str, match_id: str, score: Score, winner_id: str
) -> Reason:
    """
    Record the score and the winner of a match, the match becomes completed.
    The winner must agree with the score when the score is decisive.
    """
    event: Optional[EventCategory] = store.get_event_category(tournament_id, event_id)
    if event is None:
        return Reason(False, "The event does not exist.")

    match = event.get_match(match_id)
    if match is None:
        return Reason(False, "The match does not exist.")

    if match.is_bye:
        return Reason(False, "A bye match cannot receive a score.")

    if not winner_id or winner_id not in (match.player1_id, match.player2_id):
        return Reason(False, "The winner must be one of the two players of the match.")

    calculated_winner_id = determine_winner_id(match, score)
    if calculated_winner_id is not None and calculated_winner_id != winner_id:
        return Reason(False, "The selected winner does not match the score.")

    match.score = score
    match.winner_id = winner_id
    match.status = MatchStatus.COMPLETED
    store.update_match(tournament_id, event_id, match)
    return Reason(True, None, match)
