"""
Database initialization script

Run once to create collections and indexes:
    python scripts/init_db.py
"""

import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load environment variables
load_dotenv()

import logging

from vendorhub.db.mongo import connect_to_mongo, close_mongo_connection, get_database
from vendorhub.db.indexes import create_indexes

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


async def main():
    await connect_to_mongo()
    db = get_database()

    try:
        await create_indexes(db)

        for name in ("users", "products", "services"):
            indexes = await db[name].index_information()
            logger.info(f"  📋 {name}: {', '.join(sorted(indexes))}")

        logger.info("✅ Database initialized")
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(main())
