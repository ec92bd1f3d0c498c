import json
import re
from datetime import datetime, timezone

_FENCE_PATTERN = re.compile(r"```json|```")


def formatSSEMessage(event) -> str:
    return f"data: {json.dumps(event, default=str)}\n\n"


def stripCodeFences(text: str) -> str:
    # models wrap JSON in ```json ... ``` even when asked not to
    return _FENCE_PATTERN.sub("", text).strip()


def utcTimestamp() -> str:
    return datetime.now(timezone.utc).isoformat()
