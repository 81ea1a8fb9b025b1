"""
Database abstraction for Postgres and an in-memory test implementation.

Content rows travel through the API as plain dicts keyed by column name so
one client can serve every resource table.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional, Protocol

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text, create_engine, select
from sqlalchemy.orm import Session, declarative_base, sessionmaker


class ResourceKind(str, Enum):
    NEWS = "news"
    HERO = "hero"
    EXTRACURRICULAR = "extracurricular"
    KALENDER = "kalender"
    ALUMNI = "alumni"
    GALERI = "galeri"
    SARANA = "sarana"
    HEADMASTER_MESSAGE = "headmaster_message"
    SEJARAH = "sejarah"
    VISI_MISI = "visi_misi"
    CONTACT = "contact"


class DbClient(Protocol):
    """Interface for database access."""

    def list_rows(self, kind: ResourceKind) -> list[dict]:
        ...

    def get_row(self, kind: ResourceKind, row_id: int) -> Optional[dict]:
        ...

    def first_row(self, kind: ResourceKind) -> Optional[dict]:
        ...

    def create_row(self, kind: ResourceKind, values: dict) -> dict:
        ...

    def update_row(
        self, kind: ResourceKind, row_id: int, values: dict
    ) -> Optional[dict]:
        ...

    def delete_row(self, kind: ResourceKind, row_id: int) -> Optional[dict]:
        ...

    def get_admin_by_username(self, username: str) -> Optional["AdminRecord"]:
        ...

    def save_admin(self, username: str, password_hash: str) -> "AdminRecord":
        ...


@dataclass
class AdminRecord:
    id: int
    username: str
    password_hash: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.tables: Dict[ResourceKind, Dict[int, dict]] = {
            kind: {} for kind in ResourceKind
        }
        self.admins: Dict[str, AdminRecord] = {}
        self._next_ids: Dict[str, int] = {}

    def _next_id(self, table: str) -> int:
        next_id = self._next_ids.get(table, 1)
        self._next_ids[table] = next_id + 1
        return next_id

    def _blank_row(self, kind: ResourceKind) -> dict:
        row = {column.key: None for column in MODELS[kind].__table__.columns}
        if "created_at" in row:
            row["created_at"] = _utcnow()
        return row

    def list_rows(self, kind: ResourceKind) -> list[dict]:
        return [copy.deepcopy(row) for row in self.tables[kind].values()]

    def get_row(self, kind: ResourceKind, row_id: int) -> Optional[dict]:
        row = self.tables[kind].get(row_id)
        return copy.deepcopy(row) if row else None

    def first_row(self, kind: ResourceKind) -> Optional[dict]:
        rows = self.tables[kind]
        if not rows:
            return None
        return copy.deepcopy(rows[min(rows)])

    def create_row(self, kind: ResourceKind, values: dict) -> dict:
        row = self._blank_row(kind)
        row.update(copy.deepcopy(values))
        row["id"] = self._next_id(kind.value)
        self.tables[kind][row["id"]] = row
        return copy.deepcopy(row)

    def update_row(
        self, kind: ResourceKind, row_id: int, values: dict
    ) -> Optional[dict]:
        row = self.tables[kind].get(row_id)
        if row is None:
            return None
        row.update(copy.deepcopy(values))
        return copy.deepcopy(row)

    def delete_row(self, kind: ResourceKind, row_id: int) -> Optional[dict]:
        return self.tables[kind].pop(row_id, None)

    def get_admin_by_username(self, username: str) -> Optional[AdminRecord]:
        return self.admins.get(username)

    def save_admin(self, username: str, password_hash: str) -> AdminRecord:
        existing = self.admins.get(username)
        if existing:
            existing.password_hash = password_hash
            return existing
        record = AdminRecord(
            id=self._next_id("admins"),
            username=username,
            password_hash=password_hash,
        )
        self.admins[username] = record
        return record

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        for rows in self.tables.values():
            rows.clear()
        self.admins.clear()
        self._next_ids.clear()


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @staticmethod
    def _to_dict(row) -> dict:
        return {column.key: getattr(row, column.key) for column in row.__table__.columns}

    def list_rows(self, kind: ResourceKind) -> list[dict]:
        model = MODELS[kind]
        with self.Session() as session:
            rows = session.execute(select(model).order_by(model.id.asc())).scalars()
            return [self._to_dict(row) for row in rows]

    def get_row(self, kind: ResourceKind, row_id: int) -> Optional[dict]:
        with self.Session() as session:
            row = session.get(MODELS[kind], row_id)
            return self._to_dict(row) if row else None

    def first_row(self, kind: ResourceKind) -> Optional[dict]:
        model = MODELS[kind]
        with self.Session() as session:
            stmt = select(model).order_by(model.id.asc()).limit(1)
            row = session.execute(stmt).scalar_one_or_none()
            return self._to_dict(row) if row else None

    def create_row(self, kind: ResourceKind, values: dict) -> dict:
        with self.Session() as session:
            row = MODELS[kind](**values)
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_dict(row)

    def update_row(
        self, kind: ResourceKind, row_id: int, values: dict
    ) -> Optional[dict]:
        with self.Session() as session:
            row = session.get(MODELS[kind], row_id)
            if not row:
                return None
            for key, value in values.items():
                setattr(row, key, value)
            session.commit()
            session.refresh(row)
            return self._to_dict(row)

    def delete_row(self, kind: ResourceKind, row_id: int) -> Optional[dict]:
        with self.Session() as session:
            row = session.get(MODELS[kind], row_id)
            if not row:
                return None
            deleted = self._to_dict(row)
            session.delete(row)
            session.commit()
            return deleted

    def get_admin_by_username(self, username: str) -> Optional[AdminRecord]:
        with self.Session() as session:
            stmt = select(AdminRow).where(AdminRow.username == username)
            admin = session.execute(stmt).scalar_one_or_none()
            if not admin:
                return None
            return AdminRecord(
                id=admin.id, username=admin.username, password_hash=admin.password
            )

    def save_admin(self, username: str, password_hash: str) -> AdminRecord:
        with self.Session() as session:
            stmt = select(AdminRow).where(AdminRow.username == username)
            admin = session.execute(stmt).scalar_one_or_none()
            if admin:
                admin.password = password_hash
            else:
                admin = AdminRow(username=username, password=password_hash)
                session.add(admin)
            session.commit()
            session.refresh(admin)
            return AdminRecord(
                id=admin.id, username=admin.username, password_hash=admin.password
            )


Base = declarative_base()


class AdminRow(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, nullable=False, unique=True)
    password = Column(String, nullable=False)


class HeroRow(Base):
    __tablename__ = "hero"

    id = Column(Integer, primary_key=True, autoincrement=True)
    welcome_message = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String, nullable=False)


class NewsRow(Base):
    __tablename__ = "news"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String, nullable=True)
    published_at = Column(DateTime(timezone=True), nullable=False)


class ExtracurricularRow(Base):
    __tablename__ = "extracurriculars"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String, nullable=True)


class KalenderRow(Base):
    __tablename__ = "kalender"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    file = Column(String, nullable=False)


class AlumniRow(Base):
    __tablename__ = "alumni"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    image = Column(String, nullable=True)


class GaleriRow(Base):
    __tablename__ = "galeri"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    image = Column(String, nullable=False)


class SaranaRow(Base):
    __tablename__ = "sarana"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String, nullable=True)


class HeadmasterMessageRow(Base):
    __tablename__ = "headmaster_message"

    id = Column(Integer, primary_key=True, autoincrement=True)
    message = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String, nullable=False)
    headmaster_name = Column(String, nullable=False)


class SejarahRow(Base):
    __tablename__ = "sejarah"

    id = Column(Integer, primary_key=True, autoincrement=True)
    period = Column(String, nullable=False)
    text = Column(Text, nullable=False)
    image = Column(String, nullable=True)


class VisiMisiRow(Base):
    __tablename__ = "visi_misi"

    id = Column(Integer, primary_key=True, autoincrement=True)
    visi = Column(Text, nullable=False)
    misi = Column(JSON, nullable=False, default=list)


class ContactRow(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


MODELS = {
    ResourceKind.NEWS: NewsRow,
    ResourceKind.HERO: HeroRow,
    ResourceKind.EXTRACURRICULAR: ExtracurricularRow,
    ResourceKind.KALENDER: KalenderRow,
    ResourceKind.ALUMNI: AlumniRow,
    ResourceKind.GALERI: GaleriRow,
    ResourceKind.SARANA: SaranaRow,
    ResourceKind.HEADMASTER_MESSAGE: HeadmasterMessageRow,
    ResourceKind.SEJARAH: SejarahRow,
    ResourceKind.VISI_MISI: VisiMisiRow,
    ResourceKind.CONTACT: ContactRow,
}
