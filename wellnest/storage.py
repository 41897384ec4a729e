"""Small key/value persistence for wellnest.

Values are stored as JSON in a SQLite ``settings`` table. Append-only lists
(mood history, completed goals) live one row per item in ``records`` so
concurrent sessions never overwrite each other. Reads never raise:
a missing key, a broken row or an unreadable database all give back the
caller's default.
"""
import json
import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)


class SettingsStore:
    """Persistence collaborator backed by a local SQLite file."""

    def __init__(self, path="wellnest.db"):
        self.path = Path(path)
        self._init_db()

    def _connect(self):
        return sqlite3.connect(str(self.path))

    def _init_db(self):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._connect()
            try:
                conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )""")
                conn.execute("""
                CREATE TABLE IF NOT EXISTS records (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    key TEXT NOT NULL,
                    value TEXT
                )""")
                conn.commit()
            finally:
                conn.close()
        except (OSError, sqlite3.Error) as e:
            logger.warning("Could not initialise settings db %s: %s", self.path, e)

    def get(self, key, default=None):
        """Return the stored value for ``key``, or ``default``."""
        try:
            conn = self._connect()
            try:
                row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.warning("Settings read failed for %r: %s", key, e)
            return default
        if not row:
            return default
        try:
            return json.loads(row[0])
        except (TypeError, ValueError):
            logger.warning("Ignoring unreadable value for %r", key)
            return default

    def set(self, key, value):
        """Persist a JSON-serializable value under ``key``."""
        store_val = json.dumps(value)
        try:
            conn = self._connect()
            try:
                conn.execute("INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)", (key, store_val))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.warning("Settings write failed for %r: %s", key, e)

    def append(self, key, value):
        """Add one JSON-serializable item to the list under ``key``."""
        store_val = json.dumps(value)
        try:
            conn = self._connect()
            try:
                conn.execute("INSERT INTO records (key, value) VALUES (?, ?)", (key, store_val))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.warning("Record write failed for %r: %s", key, e)

    def get_list(self, key):
        """Every item appended under ``key``, oldest first. Broken rows are skipped."""
        try:
            conn = self._connect()
            try:
                rows = conn.execute("SELECT value FROM records WHERE key = ? ORDER BY id", (key,)).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.warning("Record read failed for %r: %s", key, e)
            return []
        items = []
        for (raw,) in rows:
            try:
                items.append(json.loads(raw))
            except (TypeError, ValueError):
                logger.warning("Ignoring unreadable record under %r", key)
        return items


class MemoryStore:
    """Dict-backed store with the same interface, for tests and throwaway sessions."""

    def __init__(self, initial=None):
        self._data = {}
        self._records = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key, default=None):
        if key not in self._data:
            return default
        return json.loads(self._data[key])

    def set(self, key, value):
        self._data[key] = json.dumps(value)

    def append(self, key, value):
        self._records.setdefault(key, []).append(json.dumps(value))

    def get_list(self, key):
        return [json.loads(v) for v in self._records.get(key, [])]
