from sqlalchemy.ext.asyncio import AsyncEngine

from grievance_portal.core.logging import get_logger
from grievance_portal.db.base_class import Base
from grievance_portal.models import User, Grievance, Verification, BlockchainRecord  # noqa: F401

logger = get_logger("grievance_portal.db")


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables. Production databases are managed by Alembic."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables initialized")
