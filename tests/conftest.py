import os

# Must be set before the application modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ADMIN_USER", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "admin-pass")

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from client_reporter.core.db import get_session
from client_reporter.core.security import hash_password
from client_reporter.main import app as fastapi_app
from client_reporter.models import Base, User
from client_reporter.services.templates import seed_default_templates
from learning_site.content import ContentLibrary, get_library
from learning_site.main import app as site_app

TEST_DB_URL = "sqlite+aiosqlite://"

DEFAULT_PASSWORD = "correct-horse"


@pytest_asyncio.fixture(scope="function")
async def session_maker() -> AsyncGenerator[async_sessionmaker, None]:
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(expire_on_commit=False, bind=engine)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def default_templates(db_session: AsyncSession) -> int:
    return await seed_default_templates(db_session)


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    # Override the dependency to use the test session
    async def override_get_session():
        yield db_session

    fastapi_app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as ac:
        yield ac

    fastapi_app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def fresh_session_client(
    session_maker: async_sessionmaker, default_templates
) -> AsyncGenerator[AsyncClient, None]:
    """Like production: every request gets its own session."""
    async def override_get_session():
        async with session_maker() as session:
            yield session

    fastapi_app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as ac:
        yield ac

    fastapi_app.dependency_overrides.clear()


async def _register(ac: AsyncClient, name: str, email: str, password: str = DEFAULT_PASSWORD) -> str:
    response = await ac.post(
        "/api/auth/register", json={"name": name, "email": email, "password": password}
    )
    assert response.status_code == 201, response.text
    return response.json()["userId"]


async def _login(ac: AsyncClient, email: str, password: str = DEFAULT_PASSWORD):
    response = await ac.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response


@pytest.fixture
def register_user():
    return _register


@pytest.fixture
def login_user():
    return _login


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Insert a credentials user directly, without the default team."""
    async def _make(email: str, name: str = "Loner") -> User:
        user = User(name=name, email=email, password_hash=hash_password(DEFAULT_PASSWORD))
        db_session.add(user)
        await db_session.commit()
        return user
    return _make


@pytest_asyncio.fixture(scope="function")
async def auth_client(client: AsyncClient, default_templates) -> AsyncClient:
    """A client logged in as the owner of a freshly registered team."""
    await _register(client, "Ada Lovelace", "ada@example.com")
    await _login(client, "ada@example.com")
    return client


# Learning site

@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    guides = tmp_path / "docs" / "guides"
    guides.mkdir(parents=True)
    (guides / "README.md").write_text("# Guides index\n", encoding="utf-8")
    (guides / "DOCKER_COMPLETE_GUIDE.md").write_text(
        "# 🐳 Docker Complete Guide\n\n"
        "Intro paragraph with a [docs link](https://docs.docker.com) and a [local link](/guides/git).\n\n"
        "## 📦 Images\n\nBuild them.\n\n"
        "### Layers & Caching\n\nDetails.\n\n"
        "```bash\n## not a heading\ndocker build .\n```\n\n"
        "## Images\n\nSecond section with the same title.\n\n"
        "| Command | Purpose |\n|---|---|\n| `docker ps` | List containers |\n",
        encoding="utf-8",
    )
    (guides / "GIT_COMPLETE_GUIDE.md").write_text("# Git\n\n## Branching\n", encoding="utf-8")
    (guides / "UNLISTED_COMPLETE_GUIDE.md").write_text("# Unlisted\n", encoding="utf-8")

    beginner = tmp_path / "projects" / "01-beginner" / "static-site"
    beginner.mkdir(parents=True)
    (beginner / "README.md").write_text(
        "# 🚀 Deploy a Static Site\n\n"
        "| Field | Value |\n|---|---|\n"
        "| Skills | Linux, Nginx , Bash |\n"
        "| Deliverable | A site served over HTTPS |\n\n"
        "## Steps\n",
        encoding="utf-8",
    )
    (tmp_path / "projects" / "01-beginner" / "no-readme").mkdir()

    platform = tmp_path / "projects" / "04-platform-engineering" / "idp"
    platform.mkdir(parents=True)
    (platform / "README.md").write_text("Internal developer platform notes.\n", encoding="utf-8")

    advanced = tmp_path / "projects" / "03-advanced" / "gitops"
    advanced.mkdir(parents=True)
    (advanced / "README.md").write_text("# GitOps Pipeline\n", encoding="utf-8")

    (tmp_path / "projects" / "99-unknown" / "ghost").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def library(content_root: Path) -> ContentLibrary:
    return ContentLibrary(content_root)


@pytest_asyncio.fixture(scope="function")
async def site_client(library: ContentLibrary) -> AsyncGenerator[AsyncClient, None]:
    site_app.dependency_overrides[get_library] = lambda: library

    async with AsyncClient(transport=ASGITransport(app=site_app), base_url="http://test") as ac:
        yield ac

    site_app.dependency_overrides.clear()
