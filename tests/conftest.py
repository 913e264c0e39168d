"""
Pytest configuration and fixtures.

Every test gets its own SQLite file; coroutines are driven with asyncio.run so
no async test plugin is needed.
"""
import asyncio
import os
from datetime import date

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import tacom.models  # noqa: E402,F401
from tacom.core.database import get_session  # noqa: E402
from tacom.main import app  # noqa: E402
from tacom.models import Company, Equipment, EquipmentStatus, MaintenanceType  # noqa: E402
from tacom.models.maintenance_type import DefectCategory  # noqa: E402
from tacom.services.movement_rules import CompanyRoles  # noqa: E402
from tacom.services.movement_service import MovementContext, get_movement_context  # noqa: E402


@pytest.fixture
def session_factory(tmp_path):
    """Session factory bound to a fresh database with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'tacom-test.db'}", poolclass=NullPool)

    async def _create():
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    asyncio.run(_create())
    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def run(session_factory):
    """Run ``fn(session)`` to completion in a new event loop and return its result."""

    def _run(fn):
        async def main():
            async with session_factory() as session:
                return await fn(session)

        return asyncio.run(main())

    return _run


@pytest.fixture
def roles():
    return CompanyRoles(
        home_company_id="home",
        maintenance_partner_id="partner",
        home_family_ids=frozenset({"home", "home-poa"}),
    )


@pytest.fixture
def seed(run):
    """Two home companies, a maintenance partner, a client, four units and a small defect catalog."""

    async def _seed(session):
        session.add_all([
            Company(id="home", name="TACOM PROJETOS SC", estado="Santa Catarina"),
            Company(id="home-poa", name="TACOM SISTEMAS POA", estado="Rio Grande do Sul"),
            Company(id="partner", name="Parceiro Manutencao"),
            Company(id="client", name="Cliente Transporte", estado="Minas Gerais"),
        ])
        await session.commit()
        session.add_all([
            Equipment(id="E1", numero_serie="SN-001", tipo="Validador", company_id="home",
                      data_entrada=date(2024, 1, 10), status=EquipmentStatus.DISPONIVEL),
            Equipment(id="E2", numero_serie="SN-002", tipo="Validador", company_id="home",
                      data_entrada=date(2024, 1, 10), status=EquipmentStatus.DISPONIVEL),
            Equipment(id="E3", numero_serie="SN-003", tipo="Validador", company_id="home",
                      data_entrada=date(2024, 1, 10), status=EquipmentStatus.DISPONIVEL),
            Equipment(id="E4", numero_serie="SN-004", tipo="Catraca", company_id="client",
                      data_entrada=date(2024, 1, 10), data_saida=date(2024, 2, 1),
                      status=EquipmentStatus.EM_USO),
            MaintenanceType(id="DR01", codigo="DR01", descricao="Nao liga",
                            categoria_defeito=DefectCategory.DEFEITO_RECLAMADO),
            MaintenanceType(id="DE02", codigo="DE02", descricao="Fonte queimada",
                            categoria_defeito=DefectCategory.DEFEITO_ENCONTRADO),
            MaintenanceType(id="OUT1", codigo="OUT1", descricao="Limpeza"),
            MaintenanceType(id="LEG1", codigo="MAN-1", descricao="Manutencao geral"),
        ])
        await session.commit()

    run(_seed)


@pytest.fixture
def client(session_factory, roles, seed):
    """API client on the seeded test database with fixed company roles."""

    async def _session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_movement_context] = lambda: MovementContext(roles=roles)
    yield TestClient(app)
    app.dependency_overrides.clear()
