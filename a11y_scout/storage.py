# File: a11y_scout/storage.py
"""a11y_scout.storage: пользователи и результаты сканирований.

The scan session only sees the :class:`UserStore` and :class:`ResultStore`
protocols; :class:`SqlStore` implements both on top of SQLAlchemy's asyncio
extension (SQLite via ``aiosqlite`` by default).
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol, Sequence

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from a11y_scout.audit.scoring import ImpactCounts
from a11y_scout.errors import StorageError

__all__ = [
    "User",
    "ScannedWebsite",
    "UserStore",
    "ResultStore",
    "SqlStore",
    "STATUS_SUCCESS",
    "STATUS_FAILED",
]

logger = logging.getLogger("A11yScout")

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


# --------------------------------------------------------------------------- #
# Domain records                                                              #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class User:
    id: str
    email: str


@dataclass(frozen=True, slots=True)
class ScannedWebsite:
    id: str
    url: str
    status: str
    created_at: datetime


class UserStore(Protocol):
    async def find_by_email(self, email: str) -> Optional[User]: ...


class ResultStore(Protocol):
    async def save_scan(self, user_id: str, url: str, status: str) -> ScannedWebsite: ...

    async def save_report(
        self, website_id: str, page_url: str, status: str, summary: Optional[Sequence[Any]]
    ) -> None: ...

    async def save_stats(self, website_id: str, counts: ImpactCounts, score: float) -> None: ...


# --------------------------------------------------------------------------- #
# ORM models                                                                  #
# --------------------------------------------------------------------------- #

Base = declarative_base()


class UserRow(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=_new_id)
    email = Column(String(320), nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)


class ScannedWebsiteRow(Base):
    __tablename__ = "scanned_websites"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String(2048), nullable=False)
    status = Column(String(16), nullable=False, default=STATUS_SUCCESS)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)


class ReportRow(Base):
    __tablename__ = "reports"

    id = Column(String, primary_key=True, default=_new_id)
    web_id = Column(String, ForeignKey("scanned_websites.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String(2048), nullable=False)
    status = Column(String(16), nullable=False, default=STATUS_SUCCESS)
    summary = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)


class ReportStatsRow(Base):
    __tablename__ = "report_stats"

    id = Column(String, primary_key=True, default=_new_id)
    web_id = Column(String, ForeignKey("scanned_websites.id", ondelete="CASCADE"), nullable=False, unique=True)
    total_issues = Column(Integer, nullable=False, default=0)
    critical = Column(Integer, nullable=False, default=0)
    serious = Column(Integer, nullable=False, default=0)
    moderate = Column(Integer, nullable=False, default=0)
    minor = Column(Integer, nullable=False, default=0)
    none = Column("none", Integer, nullable=False, default=0)
    score = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now, nullable=False)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "totalIssues": self.total_issues,
            "critical": self.critical,
            "serious": self.serious,
            "moderate": self.moderate,
            "minor": self.minor,
            "none": self.none,
            "score": self.score,
        }


def _website(row: ScannedWebsiteRow) -> ScannedWebsite:
    return ScannedWebsite(id=row.id, url=row.url, status=row.status, created_at=row.created_at)


# --------------------------------------------------------------------------- #
# SQLAlchemy-backed store                                                     #
# --------------------------------------------------------------------------- #


class SqlStore:
    """User store and result store in one SQL database."""

    def __init__(self, database_url: str, *, echo: bool = False) -> None:
        self.database_url = database_url
        self.engine: AsyncEngine = create_async_engine(database_url, echo=echo, future=True)
        self.session_factory = async_sessionmaker(
            self.engine, expire_on_commit=False, autoflush=False
        )

    async def __aenter__(self) -> SqlStore:
        try:
            await self.init()
        except StorageError:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def init(self) -> None:
        """Создаёт таблицы, если их ещё нет."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot initialise database {self.database_url}: {exc}") from exc

    async def close(self) -> None:
        await self.engine.dispose()

    # -- users -------------------------------------------------------------- #

    async def find_by_email(self, email: str) -> Optional[User]:
        try:
            async with self.session_factory() as session:
                row = await session.scalar(select(UserRow).where(UserRow.email == email))
        except SQLAlchemyError as exc:
            raise StorageError(f"User lookup failed: {exc}") from exc
        return User(id=row.id, email=row.email) if row else None

    async def add_user(self, email: str) -> User:
        """Регистрирует пользователя; существующий возвращается как есть."""
        existing = await self.find_by_email(email)
        if existing:
            return existing
        try:
            async with self.session_factory() as session, session.begin():
                row = UserRow(email=email)
                session.add(row)
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot save user {email}: {exc}") from exc
        logger.info("Registered user %s", email)
        return User(id=row.id, email=row.email)

    # -- results ------------------------------------------------------------ #

    async def save_scan(self, user_id: str, url: str, status: str) -> ScannedWebsite:
        try:
            async with self.session_factory() as session, session.begin():
                row = ScannedWebsiteRow(user_id=user_id, url=url, status=status)
                session.add(row)
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot save scan of {url}: {exc}") from exc
        return _website(row)

    async def save_report(
        self, website_id: str, page_url: str, status: str, summary: Optional[Sequence[Any]]
    ) -> None:
        try:
            async with self.session_factory() as session, session.begin():
                session.add(
                    ReportRow(
                        web_id=website_id,
                        url=page_url,
                        status=status,
                        summary=list(summary) if summary is not None else None,
                    )
                )
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot save report for {page_url}: {exc}") from exc

    async def save_stats(self, website_id: str, counts: ImpactCounts, score: float) -> None:
        data = counts.as_dict()
        try:
            async with self.session_factory() as session, session.begin():
                session.add(
                    ReportStatsRow(
                        web_id=website_id,
                        total_issues=data["totalIssues"],
                        critical=data["critical"],
                        serious=data["serious"],
                        moderate=data["moderate"],
                        minor=data["minor"],
                        none=data["none"],
                        score=score,
                    )
                )
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot save stats for {website_id}: {exc}") from exc

    # -- read side ---------------------------------------------------------- #

    async def list_scans(self, user_id: str) -> List[ScannedWebsite]:
        """Сканирования пользователя, новые первыми."""
        try:
            async with self.session_factory() as session:
                rows = await session.scalars(
                    select(ScannedWebsiteRow)
                    .where(ScannedWebsiteRow.user_id == user_id)
                    .order_by(ScannedWebsiteRow.created_at.desc())
                )
                return [_website(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot list scans: {exc}") from exc

    async def get_reports(self, website_id: str) -> List[Dict[str, Any]]:
        try:
            async with self.session_factory() as session:
                rows = await session.scalars(
                    select(ReportRow).where(ReportRow.web_id == website_id).order_by(ReportRow.created_at)
                )
                return [
                    {"url": row.url, "status": row.status, "summary": row.summary} for row in rows
                ]
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot load reports: {exc}") from exc

    async def get_stats(self, website_id: str) -> Optional[Dict[str, Any]]:
        try:
            async with self.session_factory() as session:
                row = await session.scalar(
                    select(ReportStatsRow).where(ReportStatsRow.web_id == website_id)
                )
        except SQLAlchemyError as exc:
            raise StorageError(f"Cannot load stats: {exc}") from exc
        return row.as_dict() if row else None
