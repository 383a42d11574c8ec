import logging
from typing import Any


logger = logging.getLogger("audit")


def audit_log(event: str, ip: str | None, **details: Any) -> None:
    """Record a store mutation. Callers pass key names only, never values."""
    payload = {
        "event": event,
        "ip": ip,
        "details": details,
    }
    logger.info("audit", extra={"event": payload})
