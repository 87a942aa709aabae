import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.json_loader import TestDataLoader
from src.depends import get_notification_dispatcher, get_unit_of_work
from src.adapter.services.mail_queue_dispatcher import MailQueueDispatcher
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import generate_jwt
from src.domain.entities import Organization, OrganizationUser, User


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(db_session, test_data):
    """Persist the organizations, users and memberships from test_data.json"""
    for user in test_data.get_copy("users").values():
        db_session.add(User.model_validate(user))
    for organization in test_data.get_copy("organizations").values():
        db_session.add(Organization.model_validate(organization))
    await db_session.flush()
    for organization_user in test_data.get_copy("organization_users").values():
        db_session.add(OrganizationUser.model_validate(organization_user))
    await db_session.commit()
    return test_data


@pytest_asyncio.fixture
async def app(session_factory, seeded):
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    def override_get_notification_dispatcher():
        return MailQueueDispatcher(session_factory)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_notification_dispatcher] = (
        override_get_notification_dispatcher
    )
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
def auth_headers(seeded):
    """Build a bearer header for a seeded user by key"""

    def _headers(user_key: str) -> dict:
        user = seeded.get("users")[user_key]
        token = generate_jwt(user["id"], user["email"])
        return {"Authorization": f"Bearer {token}"}

    return _headers
