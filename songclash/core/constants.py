"""Global constants for the songclash application."""

# Collection names
GAMES_COLLECTION = "games"
PLAYERS_SUBCOLLECTION = "players"
ROUNDS_SUBCOLLECTION = "rounds"
CHALLENGES_COLLECTION = "challenges"

# Game settings domains
VALID_ROUNDS = (3, 5, 7, 10)
VALID_MAX_PLAYERS = (3, 4, 5, 6)
# Time limits in seconds; None means no limit
VALID_TIME_LIMITS = (60, 90, 120)

DEFAULT_GAME_SETTINGS = {
    "rounds": 5,
    "maxPlayers": 6,
    "allowExplicit": True,
    "selectionTimeLimit": 90,
    "rankingTimeLimit": 60,
}

MIN_PLAYERS_TO_START = 2

# Player constants
MAX_PLAYER_NAME_LENGTH = 25

# Round constants
MAX_CHALLENGE_LENGTH = 200
PREVIEW_DURATION_SECONDS = 30

GAME_ID_LENGTH = 6
