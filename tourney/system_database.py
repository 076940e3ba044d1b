"""
Database connection and schema shared by the data access modules
"""

import sqlite3

from tourney.log import print_error_log
from tourney.values import DATABASE_NAME, DATABASE_NAME_TEST

MATCH_STATUSES = ("Upcoming", "Live", "Completed", "Walkover", "Retired")


class DatabaseManager:
    """Handle the database connection to the right file"""

    def __init__(self, name):
        """Initialize the database manager name which correspond to the file name"""
        self.set_database_name(name)

    def set_database_name(self, name: str) -> None:
        """
        Set the database name
        """
        self.name = name
        self.conn = sqlite3.connect(name)
        if name != ":memory:":
            self.conn.execute("PRAGMA journal_mode=WAL;")  # Performance gain on write
        self.cursor = self.conn.cursor()
        self.init_database()

    def get_database_name(self):
        """Get the database name, useful to know if test or prod"""
        return self.name

    def init_database(self):
        """Ensure that database has all the tables"""

        ### EVENT CATEGORY TABLES ###
        self.get_cursor().execute(
            """
        CREATE TABLE IF NOT EXISTS event_category (
            tournament_id TEXT NOT NULL,
            id TEXT NOT NULL,
            name TEXT NOT NULL,
            event_type TEXT NOT NULL DEFAULT 'Singles',
            gender TEXT NOT NULL DEFAULT 'Any',
            age_group TEXT NULL,
            draw_generated INTEGER NOT NULL DEFAULT 0,
            PRIMARY KEY (tournament_id, id)
        )
        """
        )

        ### ROSTER TABLES ###
        self.get_cursor().execute(
            """
        CREATE TABLE IF NOT EXISTS player (
            tournament_id TEXT NOT NULL,
            event_id TEXT NOT NULL,
            id TEXT NOT NULL,
            position INTEGER NOT NULL,
            name TEXT NOT NULL,
            club TEXT NULL,
            partner_name TEXT NULL,
            seed_number INTEGER NULL,
            PRIMARY KEY (tournament_id, event_id, id),
            FOREIGN KEY(tournament_id, event_id) REFERENCES event_category(tournament_id, id)
        )
        """
        )
        self.get_cursor().execute(
            """
        CREATE TABLE IF NOT EXISTS event_seed (
            tournament_id TEXT NOT NULL,
            event_id TEXT NOT NULL,
            player_id TEXT NOT NULL,
            position INTEGER NOT NULL,
            PRIMARY KEY (tournament_id, event_id, player_id),
            FOREIGN KEY(tournament_id, event_id) REFERENCES event_category(tournament_id, id)
        )
        """
        )

        ### MATCH TABLES ###
        statuses = ", ".join(f"'{status}'" for status in MATCH_STATUSES)
        self.get_cursor().execute(
            f"""
        CREATE TABLE IF NOT EXISTS tournament_match (
            tournament_id TEXT NOT NULL,
            event_id TEXT NOT NULL,
            id TEXT NOT NULL,
            round INTEGER NOT NULL,
            match_number INTEGER NOT NULL,
            player1_id TEXT NULL,
            player2_id TEXT NULL,
            player1_name TEXT NULL,
            player2_name TEXT NULL,
            set1_player1 INTEGER NULL,
            set1_player2 INTEGER NULL,
            set2_player1 INTEGER NULL,
            set2_player2 INTEGER NULL,
            set3_player1 INTEGER NULL,
            set3_player2 INTEGER NULL,
            winner_id TEXT NULL,
            status TEXT CHECK(status IN ({statuses})) NOT NULL DEFAULT 'Upcoming',
            is_bye INTEGER NOT NULL DEFAULT 0,
            PRIMARY KEY (tournament_id, event_id, id),
            UNIQUE (tournament_id, event_id, round, match_number),
            FOREIGN KEY(tournament_id, event_id) REFERENCES event_category(tournament_id, id)
        )
        """
        )
        self.get_conn().commit()

    def drop_all_tables(self):
        """Remove every table, mostly used by the integration tests"""
        self.get_cursor().execute("DROP TABLE IF EXISTS tournament_match;")
        self.get_cursor().execute("DROP TABLE IF EXISTS event_seed;")
        self.get_cursor().execute("DROP TABLE IF EXISTS player;")
        self.get_cursor().execute("DROP TABLE IF EXISTS event_category;")
        self.get_conn().commit()

    def get_conn(self):
        """Access to the database connection"""
        return self.conn

    def get_cursor(self):
        """Access to the database cursor"""
        return self.cursor

    def data_access_transaction(self):
        """Provide a context manager for transactions"""
        return self.TransactionContext(self)

    class TransactionContext:
        """Internal class to handle transaction context"""

        def __init__(self, db_manager):
            self.db_manager = db_manager

        def __enter__(self):
            """Begin a transaction"""
            self.db_manager.conn.execute("BEGIN TRANSACTION")
            return self.db_manager.get_cursor()  # Reuse the database manager's cursor

        def __exit__(self, exc_type, exc_val, exc_tb):
            """Commit or rollback the transaction"""
            if exc_type is None:
                self.db_manager.conn.commit()  # Commit if no exception
            else:
                self.db_manager.conn.rollback()  # Rollback if an exception occurred
                print_error_log(f"system_database:TransactionContext:__exit__: {exc_val}")
            return False  # The error bubbles up to the caller


database_manager = DatabaseManager(DATABASE_NAME)
