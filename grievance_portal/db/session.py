import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm.exc import StaleDataError

from grievance_portal.core.config import settings
from grievance_portal.core.errors import ConflictError, PersistenceUnavailableError


def engine_options(url: str) -> Dict[str, Any]:
    timeout = settings.DB_TIMEOUT_SECONDS
    if url.startswith("sqlite"):
        return {"echo": settings.DB_ECHO, "connect_args": {"timeout": timeout}}
    return {
        "echo": settings.DB_ECHO,
        "pool_pre_ping": True,
        "pool_timeout": timeout,
        "connect_args": {"timeout": timeout, "command_timeout": timeout},
    }


engine = create_async_engine(settings.DATABASE_URI, **engine_options(settings.DATABASE_URI))

SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with SessionLocal() as session:
        yield session


@asynccontextmanager
async def unit_of_work(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run a block as one transaction: commit on success, roll back on any error.

    Driver level failures are translated into domain errors so the HTTP layer
    can tell a conflicting write (409) from an unavailable database (503).
    """
    try:
        yield db
        await db.commit()
    except StaleDataError as e:
        await db.rollback()
        raise ConflictError() from e
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError("The request conflicts with an existing record") from e
    except (OperationalError, asyncio.TimeoutError) as e:
        await db.rollback()
        raise PersistenceUnavailableError() from e
    except BaseException:
        await db.rollback()
        raise
