# campus_market/database.py
"""
Simple file-backed DB layer using CSV files as storage.
Provides basic CRUD primitives per table name. Uses file locking so that
read-modify-write cycles from concurrent requests do not corrupt files.

Every cell is stored as text; callers (the repositories) convert to and from
their own types.

Usage:
    from campus_market.database import FileBackedDB
    db = FileBackedDB.from_settings(settings)
    db.list_records("sections")
    db.get_record("products", "id", "3f2a...")
    db.create_record("sections", {"title": "Phones"})
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
import uuid

import pandas as pd
from filelock import FileLock

from campus_market.config import Settings


class FileBackedDB:
    """
    Manages CSV files inside data_dir.
    Table name corresponds to a file name in `table_files` (or `<table>.csv`).
    """

    def __init__(self, data_dir: Path, table_files: Optional[Dict[str, str]] = None,
                 lock_timeout: float = -1):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.table_files = dict(table_files or {})
        self.lock_timeout = lock_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "FileBackedDB":
        return cls(
            settings.DATA_DIR,
            table_files={
                "sections": settings.SECTIONS_FILE,
                "products": settings.PRODUCTS_FILE,
            },
            lock_timeout=settings.LOCK_TIMEOUT,
        )

    def _file_path(self, table: str) -> Path:
        """
        Resolve table -> file path. If table looks like a filename (has .csv),
        use it directly (relative to data_dir). Otherwise use the configured
        mapping, else fallback to table + .csv
        """
        if table.endswith(".csv"):
            return self.data_dir / Path(table)
        filename = self.table_files.get(table, f"{table}.csv")
        return self.data_dir / Path(filename)

    def _lock_for(self, table: str) -> FileLock:
        return FileLock(str(self._file_path(table)) + ".lock", timeout=self.lock_timeout)

    def _read_df(self, table: str) -> pd.DataFrame:
        path = self._file_path(table)
        if not path.exists():
            return pd.DataFrame()
        # keep_default_na=False so titles like "NA" survive the round trip
        return pd.read_csv(path, dtype=str, keep_default_na=False)

    def _write_df_nolock(self, table: str, df: pd.DataFrame) -> None:
        """
        Write DataFrame for `table` WITHOUT acquiring the file lock.
        Use this only when the caller already holds the lock.
        """
        path = self._file_path(table)
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False)

    @staticmethod
    def _row_out(row: Dict[str, Any]) -> Dict[str, Any]:
        return {k: (None if pd.isna(v) else v) for k, v in row.items()}

    # --- high-level CRUD primitives ---

    def list_records(self, table: str) -> List[Dict[str, Any]]:
        """Rows in insertion order."""
        df = self._read_df(table)
        if df.empty:
            return []
        return [self._row_out(r) for r in df.to_dict(orient="records")]

    def get_record(self, table: str, key: str, value: Any) -> Optional[Dict[str, Any]]:
        df = self._read_df(table)
        if df.empty or key not in df.columns:
            return None
        # treat everything as string for comparison simplicity
        mask = df[key].astype(str) == str(value)
        if not mask.any():
            return None
        return self._row_out(df[mask].iloc[0].to_dict())

    def create_record(self, table: str, data: Dict[str, Any], id_field: str = "id") -> Dict[str, Any]:
        """
        Create a new record. If id_field not present in `data`, one will be generated (uuid4 hex).
        Returns the saved record (with id).
        """
        data = dict(data)
        if not data.get(id_field):
            data[id_field] = uuid.uuid4().hex
        new_row = {k: ("" if v is None else v) for k, v in data.items()}
        with self._lock_for(table):
            df = self._read_df(table)
            if df.empty:
                df = pd.DataFrame([new_row])
            else:
                df = pd.concat([df, pd.DataFrame([new_row])], ignore_index=True, sort=False)
            self._write_df_nolock(table, df.fillna(""))
        return data

    def update_record(self, table: str, key: str, value: Any, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Update rows where df[key] == value with fields in updates. Returns the updated first row dict or None.
        """
        with self._lock_for(table):
            df = self._read_df(table)
            if df.empty or key not in df.columns:
                return None
            mask = df[key].astype(str) == str(value)
            if not mask.any():
                return None
            for k, v in updates.items():
                if k not in df.columns:
                    df[k] = ""
                df.loc[mask, k] = "" if v is None else v
            self._write_df_nolock(table, df)
            return self._row_out(df[mask].iloc[0].to_dict())

    def delete_record(self, table: str, key: str, value: Any) -> bool:
        """
        Delete all records where df[key] == value. Returns True if any rows were removed.
        """
        with self._lock_for(table):
            df = self._read_df(table)
            if df.empty or key not in df.columns:
                return False
            orig_len = len(df)
            df = df[df[key].astype(str) != str(value)]
            if len(df) == orig_len:
                return False
            self._write_df_nolock(table, df)
            return True
