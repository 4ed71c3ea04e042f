import uuid

import pytest
from sqlalchemy import event
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

from designhub.core.audit.models import AuditLog  # noqa
from designhub.core.contractors.models import Contractor, ProjectContractor  # noqa
from designhub.core.drawings.models import Drawing, DrawingRevision  # noqa
from designhub.core.files.models import File  # noqa
from designhub.core.projects.models import Project, ProjectSequence  # noqa
from designhub.core.projects.schemas import ProjectCreate
from designhub.core.projects.service import create_project
from designhub.core.tenants.models import Tenant
from designhub.core.transmittals.models import Transmittal, TransmittalItem  # noqa
from designhub.db.base import Base

USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")


@compiles(JSONB, "sqlite")
def _jsonb_on_sqlite(type_, compiler, **kw):
    return "JSON"


# A column declared UUID gets NUMERIC affinity on SQLite, which turns all-digit
# hex ids into integers; declare it as text so ids round-trip.
@compiles(UUID, "sqlite")
def _uuid_on_sqlite(type_, compiler, **kw):
    return "CHAR(32)"


@pytest.fixture
async def db():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)

    # pysqlite defers BEGIN on its own; take it over so SAVEPOINT behaves.
    @event.listens_for(engine.sync_engine, "connect")
    def _no_implicit_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _explicit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
    async with factory() as session:
        async with session.begin():
            yield session
    await engine.dispose()


@pytest.fixture
async def project(db):
    tenant = Tenant(name="Studio", slug="studio", business_name="Studio Co")
    db.add(tenant)
    await db.flush()
    return await create_project(
        db, tenant.id,
        ProjectCreate(name="Smith House", client_name="Alex Client", client_email="alex@client.com"),
        created_by=USER_ID,
    )
