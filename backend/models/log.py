# backend/models/log.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


# Represents an audit log entry tracking user actions and events
@dataclass(frozen=True)
class Log:
    id: int
    ts: datetime
    user_id: Optional[str]
    action: str
    resource: str
    status: str
    ip: Optional[str] = None

    # JSON-like container for flexible context data
    meta: Dict[str, Any] = field(default_factory=dict)
