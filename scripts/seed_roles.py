"""
Seed script to create the student union office catalog.

Run this script after deployment (the server also does it on startup unless
SEED_ROLES_ON_STARTUP=0). Existing offices are left untouched.

Usage:
    uv run python -m scripts.seed_roles
"""
import asyncio

from app.core.database.engine import get_db, init_db
from app.features.offices.catalog import iter_catalog
from app.features.offices.registry import ensure_catalog
from app.utils import get_logger


log = get_logger(__name__)


async def main():
    """Create tables and any missing catalog offices."""
    log.info("Starting role seeding...")
    
    # Initialize database tables first
    log.info("Initializing database tables...")
    await init_db()
    
    # Get database session
    async for db in get_db():
        try:
            report = await ensure_catalog(db, actor="seed_roles")
            
            log.info("Role seeding completed successfully!")
            log.info(f"  - {report.created} offices created")
            log.info(f"  - {report.existing} offices already present")
            log.info(f"  - {sum(1 for _ in iter_catalog())} offices in the catalog")
            
        except Exception as e:
            log.error(f"Error seeding roles: {e}", exc_info=True)
            await db.rollback()
            raise
        
        break  # Only use first session


if __name__ == "__main__":
    asyncio.run(main())
