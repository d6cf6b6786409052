"""ORM models for configured API syncs.

``ApiConfiguration`` stores how to call one external API and map its
response; ``SyncedUser`` stores the normalized records a sync produced.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text, Uuid, func, text
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database import Base


class ApiConfiguration(Base):
    """Stored description of one external API."""

    __tablename__ = "api_configurations"
    __table_args__ = (
        Index(
            "uq_api_configurations_active_system_name",
            "system_name",
            unique=True,
            postgresql_where=text("active"),
            sqlite_where=text("active"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    system_name: Mapped[str] = mapped_column(String(255), nullable=False)
    api_url: Mapped[str] = mapped_column(Text, nullable=False)
    http_method: Mapped[str] = mapped_column(String(10), nullable=False, default="GET")
    headers: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    query_params: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    request_body: Mapped[str | None] = mapped_column(Text, nullable=True)
    field_mappings: Mapped[dict] = mapped_column(JSON, nullable=False)
    data_path: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<ApiConfiguration(id={self.id}, system_name='{self.system_name}', active={self.active})>"


class SyncedUser(Base):
    """Normalized record fetched from an external system."""

    __tablename__ = "synced_users"
    __table_args__ = (
        Index("ix_synced_users_system_name", "system_name"),
        Index("ix_synced_users_system_external_id", "system_name", "external_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    external_id: Mapped[str | None] = mapped_column(String(512), nullable=True)
    system_name: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(512), nullable=True)
    email: Mapped[str | None] = mapped_column(String(512), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    timezone: Mapped[str | None] = mapped_column(String(100), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    scheduling_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    additional_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    fetched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<SyncedUser(id={self.id}, system='{self.system_name}', external_id='{self.external_id}')>"
