from datetime import datetime, timezone

from models.log import Log

def write_log(store, *, user_id, action, resource, status="SUCCESS", ip=None, meta=None):
    entry = Log(
        id=len(store.logs) + 1,
        ts=datetime.now(timezone.utc),
        user_id=user_id,
        action=action,
        resource=resource,
        status=status,
        ip=ip,
        meta=meta or {},
    )
    store.logs.append(entry)
    return entry
