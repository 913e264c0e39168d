from datetime import datetime, timezone
from uuid import uuid4

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime


class State(SQLModel, table=True):
    """Region/state names offered for ``Company.estado`` and ``Equipment.estado``."""

    __tablename__ = "estados"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    nome: str = Field(index=True, sa_column_kwargs={"unique": True})
    ativo: bool = True
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
