"""Database Connection and Session Management"""

import re
import ssl
from typing import AsyncGenerator, Dict, Tuple

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from app.config import settings

_SSLMODE_REQUIRED = re.compile(r"[?&]sslmode=(require|required|verify-full)", re.I)


def build_async_url(url: str) -> Tuple[str, Dict[str, object]]:
    """
    Return (asyncpg URL, connect_args) for a postgresql:// URL.

    asyncpg takes ssl=SSLContext instead of sslmode, so sslmode is stripped
    from the URL and turned into an encrypting, non-verifying context.
    """
    async_url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    connect_args: Dict[str, object] = {}
    if _SSLMODE_REQUIRED.search(async_url):
        ssl_ctx = ssl.create_default_context()
        ssl_ctx.check_hostname = False
        ssl_ctx.verify_mode = ssl.CERT_NONE
        connect_args["ssl"] = ssl_ctx
    async_url = re.sub(r"([?&])sslmode=[^&]*&?", r"\1", async_url, flags=re.I)
    async_url = async_url.rstrip("?&")
    return async_url, connect_args


database_url, connect_args = build_async_url(settings.DATABASE_URL)

# Create async engine with connection pooling
engine = create_async_engine(
    database_url,
    connect_args=connect_args,
    pool_pre_ping=True,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_timeout=settings.DB_POOL_TIMEOUT,
    pool_recycle=settings.DB_POOL_RECYCLE,
    echo=settings.DEBUG,
    future=True,
)

# Create async session factory. Instances stay readable after commit so the
# PDF pipeline can keep using the invoice it loaded across its own commits.
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Base class for declarative models
Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function to get database session.

    Commits when the request handler returns and rolls back when it raises.
    Generation log rows are committed by the services themselves so that a
    failed attempt is still recorded.

    Yields:
        AsyncSession: Database session
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """Create billing tables and enum types (for development only)"""
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections"""
    await engine.dispose()
