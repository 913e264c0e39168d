from datetime import datetime, timezone
from uuid import uuid4

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime


class EquipmentType(SQLModel, table=True):
    __tablename__ = "tipos_equipamento"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    nome: str = Field(index=True, sa_column_kwargs={"unique": True})
    ativo: bool = True
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
