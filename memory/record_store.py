# memory/record_store.py
"""
IronLog — JSON Record Store
===========================
Generic insert/select/update/delete over named tables, persisted as one JSON
document: {"meal_entries": [...], "programs": [...], ...}.

Every inserted record gets an `id` and a `created_at` timestamp.
"""

import json
import os
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

# =============================================================================
# CONFIGURATION
# =============================================================================
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.getenv("IRONLOG_DATA_DIR") or os.path.join(BASE_DIR, "data")
RECORDS_FILE = os.path.join(DATA_DIR, "records.json")


class JsonRecordStore:
    """Reads and writes table rows to a JSON file."""

    def __init__(self, filepath: Optional[str] = None):
        self.filepath = filepath or RECORDS_FILE
        self.tables: Dict[str, List[Dict[str, Any]]] = self._load()

    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        if not os.path.exists(self.filepath):
            return {}
        try:
            with open(self.filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"⚠️ Record store unreadable, starting empty: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def save(self):
        """Write all tables to disk."""
        directory = os.path.dirname(self.filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.filepath, "w", encoding="utf-8") as f:
            json.dump(self.tables, f, indent=2, default=str)

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------
    def insert(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        row = dict(record)
        row.setdefault("id", uuid.uuid4().hex)
        row.setdefault("created_at", datetime.now().isoformat())
        self.tables.setdefault(table, []).append(row)
        self.save()
        return dict(row)

    def select(self, table: str, **filters: Any) -> List[Dict[str, Any]]:
        """Rows whose fields equal every keyword filter, in insertion order."""
        return [
            dict(row) for row in self.tables.get(table, [])
            if all(row.get(k) == v for k, v in filters.items())
        ]

    def get(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        rows = self.select(table, id=record_id)
        return rows[0] if rows else None

    def update(self, table: str, record_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for row in self.tables.get(table, []):
            if row.get("id") == record_id:
                row.update({k: v for k, v in changes.items() if k != "id"})
                self.save()
                return dict(row)
        return None

    def delete(self, table: str, record_id: str) -> bool:
        rows = self.tables.get(table, [])
        kept = [row for row in rows if row.get("id") != record_id]
        if len(kept) == len(rows):
            return False
        self.tables[table] = kept
        self.save()
        return True


__all__ = [
    "JsonRecordStore",
    "DATA_DIR",
    "RECORDS_FILE",
]
