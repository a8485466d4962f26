SCHEMA_VERSION = 1

DEFAULT_POINTS_TO_WIN = 11
DEFAULT_SERVES_BEFORE_CHANGE = 2
DEFAULT_SERVES_IN_DEUCE = 1
DEFAULT_SERVE_STYLE = "free"

# Seed game modes. A match copies one of these into its own MatchConfig.
GAME_MODES = {
    "Standard 11": {
        "points_to_win": 11,
        "serves_before_change": 2,
        "deuce_enabled": True,
        "serves_in_deuce": 1,
        "serve_style": "free",
        "description": "Classic game to 11 points (2 serves each)",
    },
    "Classic 21": {
        "points_to_win": 21,
        "serves_before_change": 5,
        "deuce_enabled": True,
        "serves_in_deuce": 1,
        "serve_style": "free",
        "description": "Old school game to 21 points (5 serves each)",
    },
}

DEFAULT_GAME_MODE = "Standard 11"
