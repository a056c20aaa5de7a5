"""Shared base entity for all database models."""
from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class BaseEntity(DeclarativeBase):
    """Base class for all database entities.

    Rows are append-only: there is no ``updated_at`` column.
    """

    @declared_attr
    def __tablename__(cls) -> str:
        """Generate table name from class name."""
        return cls.__name__.lower()

    # Never hand out a rowid twice, even if the newest row were removed.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation of the entity."""
        return f"<{self.__class__.__name__}(id={self.id})>"
