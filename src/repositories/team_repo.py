# COMPONENT: IN-MEMORY TEAM REPOSITORY
# REQUIREMENTS SATISFIED: team member metadata persistence for the asset clean-up flow

"""
src/repositories/team_repo.py

Defines an in-memory repository for team member records.

The production site keeps team members in a hosted database; this
repository mirrors the operations the upload boundary relies on (create,
fetch, update, delete, ordered listing) so the photo replacement and
clean-up flow can run end to end in development and tests.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class InMemoryTeamRepo:
    def __init__(self):
        self._store: Dict[str, Dict[str, Any]] = {}

    def create(self, item: Dict[str, Any]) -> Dict[str, Any]:
        item_id = str(uuid.uuid4())
        row = dict(item)
        row["id"] = item_id
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        self._store[item_id] = row
        return dict(row)

    def get(self, item_id: str) -> Optional[Dict[str, Any]]:
        row = self._store.get(item_id)
        return dict(row) if row is not None else None

    def update(self, item_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if item_id not in self._store:
            return None
        self._store[item_id].update(fields)
        return dict(self._store[item_id])

    def delete(self, item_id: str) -> Optional[Dict[str, Any]]:
        return self._store.pop(item_id, None)

    def list(self, include_inactive: bool = False) -> List[Dict[str, Any]]:
        rows = [
            dict(r)
            for r in self._store.values()
            if include_inactive or r.get("is_active", True)
        ]
        rows.sort(key=lambda r: (r.get("order", 0), r.get("created_at", "")))
        return rows

    def count(self) -> int:
        return len(self._store)
