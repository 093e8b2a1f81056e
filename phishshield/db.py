# db.py
"""
Database module using SQLAlchemy (SQLite).
Stores the running scan counters (total scans, high-risk "blocked" scans)
so they survive process restarts.
"""

import os
import logging
from dataclasses import dataclass
from typing import Dict

from sqlalchemy import create_engine, Column, Integer, Text
from sqlalchemy.orm import sessionmaker, declarative_base

DB_FILE = os.getenv("PHISHSHIELD_DB", "phishshield.db")
DATABASE_URL = f"sqlite:///{DB_FILE}"

COUNTERS_KEY = "phishing-stats"

logger = logging.getLogger("db")

Base = declarative_base()


class ScanCounter(Base):
    __tablename__ = "scan_counters"
    key = Column(Text, primary_key=True)
    checked = Column(Integer, nullable=False, default=0)
    blocked = Column(Integer, nullable=False, default=0)


@dataclass(frozen=True)
class Counters:
    checked: int = 0
    blocked: int = 0

    def bump(self, blocked: bool) -> "Counters":
        """Counters after one more scan."""
        return Counters(
            checked=self.checked + 1,
            blocked=self.blocked + (1 if blocked else 0),
        )

    @property
    def protection_rate(self) -> int:
        """Blocked share of all scans as a whole percentage, halves rounded up."""
        if self.checked <= 0:
            return 0
        return int(self.blocked / self.checked * 100 + 0.5)

    def to_dict(self) -> Dict[str, int]:
        return {"checked": self.checked, "blocked": self.blocked, "protection_rate": self.protection_rate}


class CounterStore:
    """load()/save() access to the persisted counters."""

    def __init__(self, database_url: str = DATABASE_URL):
        self.database_url = database_url
        self.engine = create_engine(database_url, connect_args={"check_same_thread": False})
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)
        Base.metadata.create_all(bind=self.engine)

    def load(self) -> Counters:
        session = self.SessionLocal()
        try:
            row = session.get(ScanCounter, COUNTERS_KEY)
        finally:
            session.close()
        if not row:
            return Counters()
        return Counters(checked=row.checked, blocked=row.blocked)

    def save(self, counters: Counters) -> None:
        session = self.SessionLocal()
        try:
            row = session.get(ScanCounter, COUNTERS_KEY)
            if row is None:
                row = ScanCounter(key=COUNTERS_KEY)
                session.add(row)
            row.checked = counters.checked
            row.blocked = counters.blocked
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
        logger.debug("Saved counters checked=%d blocked=%d", counters.checked, counters.blocked)

    def dispose(self) -> None:
        self.engine.dispose()
