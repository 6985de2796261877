"""Game configuration constants."""

# Menu defaults
DEFAULT_GRID_SIZE = 5
DEFAULT_PLAYER_COUNT = 2
DEFAULT_TIME_LIMIT = 45  # Seconds on each side's battle clock

# Menu bounds (enforced at the presentation boundary)
GRID_SIZE_RANGE = (4, 10)
MIN_PLAYERS = 2
TIME_LIMIT_RANGE = (10, 120)

# Battle
PENALTY_MS = 3000  # Cooldown after a wrong answer
TICK_SECONDS = 1  # Battle clock resolution

# Map generation
MAP_ROUNDS_PER_CELL = 4  # Safety cap = factor * grid_size ** 2 rounds

# Persistence
STORAGE_KEY = "quiz_conquest_save_v3"
SNAPSHOT_VERSION = 3

# Testing
RNG_SEED_DEFAULT = 42  # Default seed for testing
