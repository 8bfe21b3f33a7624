from app.models.enums import IntentKind, IntentStatus, PollOutcome
from app.models.intent import CreatedIntent, IntentSnapshot, build_mandate_data

__all__ = [
    "CreatedIntent",
    "IntentSnapshot",
    "build_mandate_data",
    "IntentKind",
    "IntentStatus",
    "PollOutcome",
]
