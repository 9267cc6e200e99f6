from typing import Any, Dict, List, Optional


class ValidationError(Exception):
    """Raised when submitted scores or set records are invalid."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


def _as_score(value: Any, label: str) -> int:
    # Reject booleans explicitly (bool is a subclass of int in Python)
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be an integer (not a boolean).")
    try:
        score = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be an integer.")
    if score < 0:
        raise ValidationError(f"{label} must be >= 0.")
    return score


def validate_score_update(
    home_score: Any,
    away_score: Any,
    current_set: Any,
    *,
    max_set: int = 5,
) -> tuple[int, int, int]:
    """Validate a manual running-score correction.

    Returns the normalized ``(home_score, away_score, current_set)`` tuple.
    """

    home = _as_score(home_score, "homeScore")
    away = _as_score(away_score, "awayScore")
    if isinstance(current_set, bool):
        raise ValidationError("currentSet must be an integer (not a boolean).")
    try:
        set_number = int(current_set)
    except (TypeError, ValueError):
        raise ValidationError("currentSet must be an integer.")
    if not 1 <= set_number <= max_set:
        raise ValidationError(f"currentSet must be between 1 and {max_set}.")
    return home, away, set_number


def validate_set_records(
    sets: List[Dict[str, Any]],
    *,
    max_sets: Optional[int] = 5,
    max_points_per_side: Optional[int] = 1000,
) -> List[Dict[str, Any]]:
    """Validate a list of completed set records.

    Rules:
    - The value must be a list (it may be empty)
    - Number of sets must be <= ``max_sets`` (if provided)
    - Each set must be an object ``{homeScore, awayScore, completed}``
    - Scores must be integers >= 0 (booleans are rejected)
    - ``completed`` must be ``True``; partially played sets are never stored
    """

    if not isinstance(sets, list):
        raise ValidationError("Sets must be provided as a list.")
    if max_sets is not None and len(sets) > max_sets:
        raise ValidationError(f"Too many sets. Max allowed is {max_sets}.")

    normalized: List[Dict[str, Any]] = []
    for i, s in enumerate(sets, start=1):
        if not isinstance(s, dict):
            raise ValidationError(
                f"Set #{i} must be an object with fields homeScore and awayScore."
            )
        if "homeScore" not in s or "awayScore" not in s:
            raise ValidationError(f"Set #{i} must include both homeScore and awayScore.")

        home = _as_score(s["homeScore"], f"Set #{i} homeScore")
        away = _as_score(s["awayScore"], f"Set #{i} awayScore")
        if max_points_per_side is not None and (
            home > max_points_per_side or away > max_points_per_side
        ):
            raise ValidationError(
                f"Set #{i} scores must be <= {max_points_per_side}."
            )
        if s.get("completed", True) is not True:
            raise ValidationError(f"Set #{i} must be completed.")
        normalized.append({"homeScore": home, "awayScore": away, "completed": True})

    return normalized
