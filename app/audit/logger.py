"""
Audit trail for processor interactions.

Every call that creates, confirms or charges an intent gets one audit line with:
  - Action (what happened)
  - Intent ID (which PaymentIntent/SetupIntent, when known)
  - Details (status, amounts, error messages)

The service keeps no storage, so the trail lives in the log stream only.
"""

import json
import logging
from typing import Any, Optional

logger = logging.getLogger("upi_autopay.audit")


def log_event(
    action: str,
    intent_id: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> None:
    """
    Emit an audit log entry.

    Args:
        action: What happened (e.g. "payment_intent_created", "setup_intent_confirmed").
        intent_id: The intent this event relates to.
        details: Arbitrary context (serialized to JSON, truncated in the log line).
    """
    logger.info(
        "AUDIT | intent=%s action=%s | %s",
        intent_id or "-",
        action,
        json.dumps(details, default=str)[:200] if details else "",
    )
