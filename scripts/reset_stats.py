import asyncio
import sys
import os

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import text
from db.session import AsyncSessionLocal
from core.logger import setup_logging, logger

# Children before parents
STATS_TABLES = ("user_answers", "quiz_attempts", "user_progress", "rankings", "user_achievements")

async def reset_statistics():
    print("⚠️  WARNING: This will RESET ALL PROGRESS AND RANKINGS (attempts, answers, stars, scores).")
    print("Users and levels are kept, but every player starts from zero.")
    confirm = input("Type 'CONFIRM' to proceed: ")

    if confirm != "CONFIRM":
        print("Operation cancelled.")
        return

    async with AsyncSessionLocal() as session:
        try:
            for table in STATS_TABLES:
                print(f"Cleaning {table} table...")
                await session.execute(text(f"TRUNCATE TABLE {table} RESTART IDENTITY CASCADE"))

            await session.commit()
            print("✅ All statistics have been reset successfully.")
            logger.info("Statistics reset", tables=list(STATS_TABLES))

        except Exception as e:
            await session.rollback()
            print(f"❌ Error resetting statistics: {e}")
            logger.error("Error resetting statistics", error=str(e))
            raise

if __name__ == "__main__":
    setup_logging()
    if os.name == 'nt':
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(reset_statistics())
