"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory database, document factory, publisher and storage mocks,
bearer tokens for API tests
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import jwt
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from docingest.boundary.aws.s3_client import S3DocumentClient
from docingest.boundary.broker.publisher import EventPublisher
from docingest.boundary.db.create_tables import create_all_tables, drop_all_tables
from docingest.boundary.db.models import DocumentModel, IngestionStatus
from docingest.configs import get_settings


@pytest.fixture
async def test_engine():
    """
    Create in-memory SQLite async engine with all tables.

    Yields:
        AsyncEngine: Engine shared by every session of one test
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all_tables(engine)

    yield engine

    await drop_all_tables(engine)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory configured like the application's."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_async_db(session_factory):
    """
    Create a database session for one test.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def owner_id() -> str:
    """User ID owning the sample documents."""
    return "user-owner-1"


@pytest.fixture
def other_user_id() -> str:
    """User ID that owns nothing."""
    return "user-other-2"


@pytest.fixture
def make_document(session_factory, owner_id):
    """
    Factory persisting a document in its own committed transaction.

    Returns:
        Callable: async (status=PENDING, owner=owner_id, title=...) -> DocumentModel
    """

    async def factory(
        status: IngestionStatus = IngestionStatus.PENDING,
        owner: str | None = None,
        title: str = "Quarterly report",
    ) -> DocumentModel:
        async with session_factory() as session:
            document = DocumentModel(
                title=title,
                storage_key=f"users/{owner or owner_id}/documents/{uuid.uuid4()}.pdf",
                owner_id=owner or owner_id,
                status=status,
            )
            session.add(document)
            await session.commit()
            return document

    return factory


@pytest.fixture
def mock_publisher() -> EventPublisher:
    """
    Create mock EventPublisher.

    Returns:
        AsyncMock: Publisher whose publish methods succeed
    """
    return AsyncMock(spec=EventPublisher)


@pytest.fixture
def mock_s3_client() -> S3DocumentClient:
    """
    Create mock S3DocumentClient.

    Returns:
        MagicMock: Storage client returning a fixed presigned URL
    """
    client = MagicMock(spec=S3DocumentClient)
    client.generate_presigned_download_url.return_value = ("https://signed.example/doc.pdf", None)
    return client


@pytest.fixture
def make_token():
    """
    Factory for bearer tokens signed with the configured secret.

    Returns:
        Callable: (user_id, role) -> "Bearer <jwt>" header value
    """
    auth_config = get_settings().auth

    def factory(user_id: str = "user-owner-1", role: str = "editor") -> dict[str, str]:
        token = jwt.encode({"sub": user_id, "role": role}, auth_config.secret, algorithm=auth_config.algorithm)
        return {"Authorization": f"Bearer {token}"}

    return factory
