"""Application services.

Only the pure validation helpers are re-exported here; import the storage
backed modules (``games``, ``roster``, ``stats``) directly.
"""

from .validation import ValidationError, validate_score_update, validate_set_records

__all__ = [
    "ValidationError",
    "validate_score_update",
    "validate_set_records",
]
