"""
vendorhub/db/indexes.py

Purpose: Database index management

- Unique phone number index backs the one-user-per-number guarantee
- Owner indexes for the owner-scoped catalog queries
"""

from pymongo import ASCENDING

from vendorhub.db.mongo import (
    USERS_COLLECTION,
    PRODUCTS_COLLECTION,
    SERVICES_COLLECTION,
)
from vendorhub.core.logging import get_logger

logger = get_logger(__name__)


async def create_indexes(db):
    """
    Creates all necessary database indexes.
    This function is idempotent - safe to run multiple times.
    """
    try:
        users = db[USERS_COLLECTION]
        products = db[PRODUCTS_COLLECTION]
        services = db[SERVICES_COLLECTION]

        logger.info("Creating database indexes...")

        # ==============================================
        # USERS COLLECTION INDEXES
        # ==============================================

        # Signup upserts rely on this to reject a second row for one number
        await users.create_index(
            [("phoneNumber", ASCENDING)],
            unique=True,
            name="phone_number_unique"
        )
        logger.debug("Created unique index on users.phoneNumber")

        await users.create_index(
            [("phoneNumber", ASCENDING), ("status", ASCENDING)],
            name="phone_status_idx"
        )
        logger.debug("Created compound index on users.phoneNumber + status")

        # ==============================================
        # CATALOG COLLECTION INDEXES
        # ==============================================

        await products.create_index([("userId", ASCENDING)], name="product_owner_idx")
        logger.debug("Created index on products.userId")

        await services.create_index([("userId", ASCENDING)], name="service_owner_idx")
        logger.debug("Created index on services.userId")

        logger.info("✅ All database indexes created successfully")

    except Exception as e:
        logger.error(f"Failed to create indexes: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    """
    Run this script directly to create indexes manually.
    """
    import asyncio
    from vendorhub.db.mongo import connect_to_mongo, close_mongo_connection, get_database

    async def main():
        await connect_to_mongo()
        await create_indexes(get_database())
        await close_mongo_connection()

    asyncio.run(main())
