import asyncio
import sys
import os

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from db.session import engine, AsyncSessionLocal
from db.seed import create_tables, initialize_basic_data
from core.logger import setup_logging, logger

async def setup_database():
    logger.info("Setting up Bible Quiz database...")
    try:
        await create_tables(engine)
        async with AsyncSessionLocal() as session:
            await initialize_basic_data(session)
    except Exception as e:
        logger.error("Database setup failed", error=str(e))
        raise
    finally:
        await engine.dispose()

    logger.info("Database setup completed")
    # Rankings start empty; rows appear as users finish levels
    logger.info("Rankings table is empty until the first attempt is recorded")

if __name__ == "__main__":
    setup_logging()
    if os.name == 'nt':
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(setup_database())
