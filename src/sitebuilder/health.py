from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from .db import Database


def healthcheck(db: Database) -> dict[str, Any]:
    """Report liveness and the schema version of the database."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "schema_version": db.schema_version(),
    }
