"""Database module."""

from __future__ import annotations

from callcal.db.engine import create_engine, init_db
from callcal.db.store import AttendanceStore

__all__ = ["AttendanceStore", "create_engine", "init_db"]
