"""Shared test fixtures for the DealDesk API test suite."""

import uuid
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from dealdesk.core.database import Base, get_db
from dealdesk.main import app
from dealdesk.models.core import User
from dealdesk.models.documents import Document, DocumentVersion
from dealdesk.modules.doc_compare.normalize import detect_content_kind
from dealdesk.modules.doc_compare.service import get_change_summarizer
from dealdesk.modules.doc_compare.summarizer import ChangeSummarizer


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession]:
    """Fresh in-memory SQLite database per test."""
    # StaticPool keeps the single in-memory connection alive across sessions
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest.fixture
def summarizer() -> ChangeSummarizer:
    """Demo-mode summarizer: no completion client, deterministic payload."""
    return ChangeSummarizer(None)


@pytest.fixture
async def client(db: AsyncSession, summarizer: ChangeSummarizer) -> AsyncGenerator[AsyncClient]:
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_change_summarizer] = lambda: summarizer
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


# ── Sample data fixtures ──────────────────────────────────────────────────

SAMPLE_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
SAMPLE_DOCUMENT_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
SAMPLE_DEAL_ID = uuid.UUID("00000000-0000-0000-0000-000000000003")


@pytest.fixture
async def sample_user(db: AsyncSession) -> User:
    user = User(
        id=SAMPLE_USER_ID,
        username="mplatt",
        full_name="Michael Platt",
        initials="MP",
        email="mplatt@example.com",
        role="Outside Counsel",
        avatar_color="#1D4ED8",
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest.fixture
async def sample_document(db: AsyncSession, sample_user: User) -> Document:
    document = Document(
        id=SAMPLE_DOCUMENT_ID,
        deal_id=SAMPLE_DEAL_ID,
        title="Term Sheet",
        category="Financing",
        assignee_id=sample_user.id,
    )
    db.add(document)
    await db.flush()
    await db.refresh(document)
    return document


async def add_version(
    db: AsyncSession,
    document: Document,
    uploader: User,
    version: int,
    content: str,
    file_name: str | None = None,
) -> DocumentVersion:
    """Insert a version row directly, bypassing the numbering service."""
    row = DocumentVersion(
        document_id=document.id,
        version=version,
        file_name=file_name or f"term-sheet-v{version}.txt",
        file_size=len(content.encode("utf-8")),
        file_type="text/plain",
        file_content=content,
        content_kind=detect_content_kind(content),
        uploaded_by_id=uploader.id,
    )
    db.add(row)
    await db.flush()
    await db.refresh(row)
    return row
