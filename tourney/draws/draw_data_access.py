"""
Read and write the event categories, their roster and their matches in the SQLite database
"""

from typing import List, Optional
from tourney.draws.draw_data_class import EventCategory, Match, Player
from tourney.draws.draw_exceptions import EventNotFoundError
from tourney.draws.draw_store import TournamentStore
from tourney.system_database import database_manager

SELECT_EVENT_CATEGORY = """
    event_category.id,
    event_category.tournament_id,
    event_category.name,
    event_category.event_type,
    event_category.gender,
    event_category.age_group,
    event_category.draw_generated
    """

SELECT_PLAYER = """
    player.id,
    player.name,
    player.club,
    player.partner_name,
    player.seed_number
    """

SELECT_MATCH = """
    tournament_match.id,
    tournament_match.round,
    tournament_match.match_number,
    tournament_match.player1_id,
    tournament_match.player2_id,
    tournament_match.player1_name,
    tournament_match.player2_name,
    tournament_match.set1_player1,
    tournament_match.set1_player2,
    tournament_match.set2_player1,
    tournament_match.set2_player2,
    tournament_match.set3_player1,
    tournament_match.set3_player2,
    tournament_match.winner_id,
    tournament_match.status,
    tournament_match.is_bye
    """


def delete_all_draw_tables() -> None:
    """
    Delete all rows of the tables related to the draw
    """
    database_manager.get_cursor().execute("DELETE FROM tournament_match;")
    database_manager.get_cursor().execute("DELETE FROM event_seed;")
    database_manager.get_cursor().execute("DELETE FROM player;")
    database_manager.get_cursor().execute("DELETE FROM event_category;")
    database_manager.get_conn().commit()


def fetch_event_category(tournament_id: str, event_id: str) -> Optional[EventCategory]:
    """Fetch the event with its roster, seeds and matches"""
    query = f"""
        SELECT {SELECT_EVENT_CATEGORY}
        FROM event_category
        WHERE event_category.tournament_id = :tournament_id
          AND event_category.id = :event_id;
        """
    row = (
        database_manager.get_cursor()
        .execute(query, {"tournament_id": tournament_id, "event_id": event_id})
        .fetchone()
    )
    if row is None:
        return None
    event = EventCategory.from_db_row(row)
    event.players = fetch_players_by_event_id(tournament_id, event_id)
    event.seeds = fetch_seeds_by_event_id(tournament_id, event_id)
    event.matches = fetch_matches_by_event_id(tournament_id, event_id)
    return event


def fetch_event_categories_by_tournament_id(tournament_id: str) -> List[EventCategory]:
    """Fetch the events of a tournament without their roster and matches"""
    query = f"""
        SELECT {SELECT_EVENT_CATEGORY}
        FROM event_category
        WHERE event_category.tournament_id = :tournament_id
        ORDER BY event_category.name;
        """
    rows = database_manager.get_cursor().execute(query, {"tournament_id": tournament_id}).fetchall()
    return [EventCategory.from_db_row(row) for row in rows]


def fetch_players_by_event_id(tournament_id: str, event_id: str) -> List[Player]:
    """Fetch the roster in registration order"""
    query = f"""
        SELECT {SELECT_PLAYER}
        FROM player
        WHERE player.tournament_id = :tournament_id
          AND player.event_id = :event_id
        ORDER BY player.position;
        """
    rows = (
        database_manager.get_cursor()
        .execute(query, {"tournament_id": tournament_id, "event_id": event_id})
        .fetchall()
    )
    return [Player.from_db_row(row) for row in rows]


def fetch_seeds_by_event_id(tournament_id: str, event_id: str) -> List[str]:
    """Fetch the seeded player ids in the order they were seeded"""
    query = """
        SELECT event_seed.player_id
        FROM event_seed
        WHERE event_seed.tournament_id = :tournament_id
          AND event_seed.event_id = :event_id
        ORDER BY event_seed.position;
        """
    rows = (
        database_manager.get_cursor()
        .execute(query, {"tournament_id": tournament_id, "event_id": event_id})
        .fetchall()
    )
    return [row[0] for row in rows]


def fetch_matches_by_event_id(tournament_id: str, event_id: str) -> List[Match]:
    """Fetch the matches ordered by round then match number"""
    query = f"""
        SELECT {SELECT_MATCH}
        FROM tournament_match
        WHERE tournament_match.tournament_id = :tournament_id
          AND tournament_match.event_id = :event_id
        ORDER BY tournament_match.round, tournament_match.match_number;
        """
    rows = (
        database_manager.get_cursor()
        .execute(query, {"tournament_id": tournament_id, "event_id": event_id})
        .fetchall()
    )
    return [Match.from_db_row(row) for row in rows]


def _match_parameters(tournament_id: str, event_id: str, match: Match) -> dict:
    score = match.score
    return {
        "id": match.id,
        "tournament_id": tournament_id,
        "event_id": event_id,
        "round": match.round,
        "match_number": match.match_number,
        "player1_id": match.player1_id,
        "player2_id": match.player2_id,
        "player1_name": match.player1_name,
        "player2_name": match.player2_name,
        "set1_player1": score.set1_player1 if score else None,
        "set1_player2": score.set1_player2 if score else None,
        "set2_player1": score.set2_player1 if score else None,
        "set2_player2": score.set2_player2 if score else None,
        "set3_player1": score.set3_player1 if score else None,
        "set3_player2": score.set3_player2 if score else None,
        "winner_id": match.winner_id,
        "status": match.status.value,
        "is_bye": int(match.is_bye),
    }


def data_access_replace_matches(
    tournament_id: str, event_id: str, matches: List[Match], draw_generated: bool = True
) -> None:
    """
    Delete the matches of the event, insert the new ones and set the draw flag in one transaction
    """
    if fetch_event_category(tournament_id, event_id) is None:
        raise EventNotFoundError(tournament_id, event_id)

    event_key = {"tournament_id": tournament_id, "event_id": event_id}
    with database_manager.data_access_transaction() as cursor:
        cursor.execute(
            "DELETE FROM tournament_match WHERE tournament_id = :tournament_id AND event_id = :event_id;",
            event_key,
        )
        cursor.executemany(
            """
            INSERT INTO tournament_match (
                tournament_id, event_id, id, round, match_number, player1_id, player2_id, player1_name, player2_name,
                set1_player1, set1_player2, set2_player1, set2_player2, set3_player1, set3_player2,
                winner_id, status, is_bye
            ) VALUES (
                :tournament_id, :event_id, :id, :round, :match_number, :player1_id, :player2_id, :player1_name,
                :player2_name, :set1_player1, :set1_player2, :set2_player1, :set2_player2, :set3_player1,
                :set3_player2, :winner_id, :status, :is_bye
            );
            """,
            [_match_parameters(tournament_id, event_id, match) for match in matches],
        )
        cursor.execute(
            """
            UPDATE event_category
            SET draw_generated = :draw_generated
            WHERE tournament_id = :tournament_id AND id = :event_id;
            """,
            {"draw_generated": int(draw_generated), **event_key},
        )


def data_access_save_event_category(event_category: EventCategory) -> None:
    """
    Insert or update the event, then rewrite its roster and seeds.
    The matches and the draw flag are left untouched.
    """
    tournament_id = event_category.tournament_id
    event_key = {"tournament_id": tournament_id, "event_id": event_category.id}
    with database_manager.data_access_transaction() as cursor:
        cursor.execute(
            """
            INSERT INTO event_category (tournament_id, id, name, event_type, gender, age_group)
            VALUES (:tournament_id, :id, :name, :event_type, :gender, :age_group)
            ON CONFLICT(tournament_id, id) DO UPDATE SET
                name = excluded.name,
                event_type = excluded.event_type,
                gender = excluded.gender,
                age_group = excluded.age_group;
            """,
            {
                "tournament_id": tournament_id,
                "id": event_category.id,
                "name": event_category.name,
                "event_type": event_category.event_type.value,
                "gender": event_category.gender.value,
                "age_group": event_category.age_group,
            },
        )
        cursor.execute(
            "DELETE FROM event_seed WHERE tournament_id = :tournament_id AND event_id = :event_id;", event_key
        )
        cursor.execute("DELETE FROM player WHERE tournament_id = :tournament_id AND event_id = :event_id;", event_key)
        cursor.executemany(
            """
            INSERT INTO player (tournament_id, event_id, id, position, name, club, partner_name, seed_number)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?);
            """,
            [
                (
                    tournament_id,
                    event_category.id,
                    player.id,
                    position,
                    player.name,
                    player.club,
                    player.partner_name,
                    player.seed_number,
                )
                for position, player in enumerate(event_category.players)
            ],
        )
        cursor.executemany(
            """
            INSERT INTO event_seed (tournament_id, event_id, player_id, position)
            VALUES (?, ?, ?, ?);
            """,
            [
                (tournament_id, event_category.id, player_id, position)
                for position, player_id in enumerate(event_category.seeds)
            ],
        )


def data_access_update_match(tournament_id: str, event_id: str, match: Match) -> None:
    """
    Update every column of a match except its position in the bracket
    """
    cursor = database_manager.get_cursor()
    cursor.execute(
        """
        UPDATE tournament_match
        SET player1_id = :player1_id,
            player2_id = :player2_id,
            player1_name = :player1_name,
            player2_name = :player2_name,
            set1_player1 = :set1_player1,
            set1_player2 = :set1_player2,
            set2_player1 = :set2_player1,
            set2_player2 = :set2_player2,
            set3_player1 = :set3_player1,
            set3_player2 = :set3_player2,
            winner_id = :winner_id,
            status = :status,
            is_bye = :is_bye
        WHERE tournament_id = :tournament_id AND event_id = :event_id AND id = :id;
        """,
        _match_parameters(tournament_id, event_id, match),
    )
    updated = cursor.rowcount
    database_manager.get_conn().commit()
    if updated == 0:
        raise KeyError(f"Match {match.id} not found in event {event_id} of tournament {tournament_id}")


class SqliteTournamentStore(TournamentStore):
    """Tournament store backed by the shared SQLite database"""

    def get_event_category(self, tournament_id: str, event_id: str) -> Optional[EventCategory]:
        return fetch_event_category(tournament_id, event_id)

    def replace_matches(
        self, tournament_id: str, event_id: str, matches: List[Match], draw_generated: bool = True
    ) -> None:
        data_access_replace_matches(tournament_id, event_id, matches, draw_generated)

    def save_event_category(self, event_category: EventCategory) -> None:
        data_access_save_event_category(event_category)

    def update_match(self, tournament_id: str, event_id: str, match: Match) -> None:
        if fetch_event_category(tournament_id, event_id) is None:
            raise EventNotFoundError(tournament_id, event_id)
        data_access_update_match(tournament_id, event_id, match)
