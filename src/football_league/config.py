"""Static simulation configuration constants."""

POSITIONS: tuple[str, ...] = ("GK", "DF", "MF", "FW")
POSITION_NAMES: dict[str, str] = {
    "GK": "Goalkeeper",
    "DF": "Defender",
    "MF": "Midfielder",
    "FW": "Forward",
}

MIN_QUALITY = 30.0
MAX_QUALITY = 100.0
MIN_MOTIVATION = 0.0
MAX_MOTIVATION = 10.0
MIN_SQUAD_NUMBER = 1
MAX_SQUAD_NUMBER = 99
MIN_FOUNDING_YEAR = 1800

BIRTH_DATE_PATTERN = r"\d{2}/\d{2}/\d{4}"

# Player training: one draw picks the quality step (first matching threshold wins).
PLAYER_MOTIVATION_STEP = 0.2
PLAYER_QUALITY_STEPS: tuple[tuple[float, float], ...] = (
    (0.10, 0.3),
    (0.30, 0.2),
)
PLAYER_BASE_QUALITY_STEP = 0.1
POSITION_DRIFT_CHANCE = 0.05
POSITION_DRIFT_QUALITY_BONUS = 1.0

COACH_SELECTOR_MOTIVATION_STEP = 0.3
COACH_MOTIVATION_STEP = 0.15
COACH_SALARY_RAISE = 1.005

# Match model.
DEFAULT_COACH_MOTIVATION = 5.0
MOTIVATION_FACTOR_DIVISOR = 20.0
BASE_GOAL_RATE = 0.5
FACTOR_DIFF_DIVISOR = 50.0

POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1

# Factory draws for newly registered persons.
NEW_PERSON_MOTIVATION = 5.0
PLAYER_SALARY_RANGE: tuple[int, int] = (100_000, 999_999)
COACH_SALARY_RANGE: tuple[int, int] = (200_000, 999_999)
NEW_PLAYER_QUALITY_RANGE: tuple[int, int] = (30, 100)

SAVE_VERSION = 1
TEAMS_FILE = "teams.json"
MARKET_FILE = "market.json"
DATA_DIR_ENV = "FOOTBALL_LEAGUE_DATA_DIR"
