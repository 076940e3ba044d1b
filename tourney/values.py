""" Constants and environment values used by the tournament application. """

import os
from dotenv import load_dotenv

load_dotenv()

""" Database file, can be overridden by the environment (.env) """
DATABASE_NAME = os.getenv("TOURNEY_DATABASE", "tournament.db")
DATABASE_NAME_TEST = os.getenv("TOURNEY_DATABASE_TEST", "tournament_test.db")

""" Log file used by the rotating file handler """
LOG_FILE = os.getenv("TOURNEY_LOG_FILE", "tourney.log")
LOG_LEVEL = os.getenv("TOURNEY_LOG_LEVEL", "INFO")

""" Values used by the knockout draw """
BYE_ID_PREFIX = "bye-"
BYE_NAME = "BYE"
MIN_ENTRANTS = 2
FIRST_ROUND = 1
