"""
Rush Bot - Centralized Constants
================================

All magic numbers and constants are defined here for maintainability.
Import from this module instead of hardcoding values.
"""

# =============================================================================
# Time Constants
# =============================================================================

SECONDS_PER_HOUR = 3600

MS_PER_SECOND = 1000

# =============================================================================
# Network Constants
# =============================================================================

HEALTH_CHECK_PORT = 8085

# =============================================================================
# Lobby Constants
# =============================================================================

LOBBY_WINDOW_SECONDS = 30             # Join window before turns begin
LOBBY_TICK_SECONDS = 5                # Countdown re-render interval

# =============================================================================
# Turn Engine Constants
# =============================================================================

IDLE_ROUNDS_LIMIT = 2                 # Full rounds with no submission before the game times out
HISTORY_LIMIT = 50                    # Completed games kept per guild in the stats store
LEADERBOARD_SIZE = 10                 # Entries shown by /<game> leaderboard

# =============================================================================
# WordRush Constants
# =============================================================================

WORDRUSH_MIN_PLAYERS = 2
WORDRUSH_MAX_PLAYERS = 20
WORDRUSH_DEFAULT_TURN_SECONDS = 10
WORDRUSH_MIN_TURN_SECONDS = 5
WORDRUSH_MAX_TURN_SECONDS = 60
WORDRUSH_DEFAULT_TARGET_WINS = 5
WORDRUSH_MIN_TARGET_WINS = 1
WORDRUSH_MAX_TARGET_WINS = 20
WORDRUSH_ATTEMPTS_PER_TURN = 6        # Messages accepted from the turn player

# =============================================================================
# SentenceRush Constants
# =============================================================================

SENTENCERUSH_MIN_PLAYERS = 1
SENTENCERUSH_MAX_PLAYERS = 6
SENTENCERUSH_DEFAULT_TURN_SECONDS = 30
SENTENCERUSH_MIN_TURN_SECONDS = 30
SENTENCERUSH_MAX_TURN_SECONDS = 60
SENTENCERUSH_MIN_WORDS = 3
SENTENCERUSH_MAX_WORDS = 8
SENTENCERUSH_HINT_VIEW_SECONDS = SECONDS_PER_HOUR
SENTENCERUSH_COUNTDOWN_SECONDS = 10   # Final seconds announced each turn

# =============================================================================
# Emojis
# =============================================================================

EMOJI_VALID = "✅"
EMOJI_INVALID = "❌"
