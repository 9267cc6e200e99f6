import logging
import os

logger = logging.getLogger(__name__)


def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + val
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val


def _parse_int(env_var: str, default: int, *, minimum: int = 0) -> int:
    raw_value = os.getenv(env_var)
    if raw_value is None or not raw_value.strip():
        return default

    try:
        value = int(raw_value)
    except ValueError:
        logger.warning(
            "%s is not a valid integer (got %r); defaulting to %d",
            env_var,
            raw_value,
            default,
        )
        return default

    if value < minimum:
        logger.warning(
            "%s must be >= %d; defaulting to %d", env_var, minimum, default
        )
        return default

    return value


API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))

SET_POINTS_TO = _parse_int("SET_POINTS_TO", 25, minimum=1)
SET_WIN_BY = _parse_int("SET_WIN_BY", 2, minimum=1)
MATCH_BEST_OF = _parse_int("MATCH_BEST_OF", 5, minimum=1)
if MATCH_BEST_OF not in (1, 3, 5):
    logger.warning("MATCH_BEST_OF must be 1, 3 or 5 (got %d); defaulting to 5", MATCH_BEST_OF)
    MATCH_BEST_OF = 5
DECIDING_SET_POINTS_TO = _parse_int("DECIDING_SET_POINTS_TO", SET_POINTS_TO, minimum=1)

DEFAULT_RULES = {
    "pointsTo": SET_POINTS_TO,
    "winBy": SET_WIN_BY,
    "bestOf": MATCH_BEST_OF,
    "decidingSetPointsTo": DECIDING_SET_POINTS_TO,
}

# 0 keeps every transition of the match
UNDO_HISTORY_LIMIT = _parse_int("UNDO_HISTORY_LIMIT", 50)

SCORING_RATE_LIMIT = os.getenv("SCORING_RATE_LIMIT") or "240/minute"
