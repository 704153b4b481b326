import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from dynaform.main import app
from dynaform.db.database import Base, create_tables, get_db


@pytest.fixture(scope="session")
async def test_engine(tmp_path_factory):
    # On-disk SQLite so the app's request sessions and the test session share data
    db_path = tmp_path_factory.mktemp("db") / "test_dynaform.db"
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )

    await create_tables(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_session(test_engine):
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture(scope="session", autouse=True)
async def override_get_db_for_app(test_engine):
    """Point the app's get_db dependency at the session-scoped test engine."""
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
async def clean_tables(test_engine):
    """Ensure DB is empty before each test by deleting from all tables (keep schema intact)."""
    async with test_engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            await conn.execute(table.delete())
    yield


@pytest.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def sample_field_payloads():
    return [
        {"name": "Full Name", "fieldType": "TEXT", "minLength": 1, "maxLength": 100,
         "defaultValue": "John Doe", "required": True},
        {"name": "Email", "fieldType": "TEXT", "minLength": 1, "maxLength": 50,
         "defaultValue": "hello@mail.com", "required": True},
        {"name": "Gender", "fieldType": "LIST", "defaultValue": "1", "required": True,
         "options": ["Male", "Female", "Others"]},
        {"name": "Love React?", "fieldType": "RADIO", "defaultValue": "1", "required": True,
         "options": ["Yes", "No"]},
    ]
