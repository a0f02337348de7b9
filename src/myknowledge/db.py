# src/myknowledge/db.py
import logging
from typing import Optional

import motor.motor_asyncio
from pymongo import ASCENDING, IndexModel

from myknowledge.config import MONGO_URI, MONGO_DB_NAME

NOTES_COLLECTION = "notes"
TAGS_COLLECTION = "tags"

logger = logging.getLogger(__name__)


class MongoManager:
    def __init__(self, client: Optional[motor.motor_asyncio.AsyncIOMotorClient] = None, db_name: str = MONGO_DB_NAME):
        self.client = client if client is not None else motor.motor_asyncio.AsyncIOMotorClient(MONGO_URI)
        self.db = self.client[db_name]

        self.notes_collection = self.db[NOTES_COLLECTION]
        self.tags_collection = self.db[TAGS_COLLECTION]

        logger.info(f"[MongoManager] Initialized. Database: {db_name}")

    async def initialize_db(self):
        logger.info("[DB_INIT] Ensuring indexes for MongoManager collections...")

        collections_with_indexes = {
            self.notes_collection: [
                IndexModel([("user_id", ASCENDING), ("is_journal", ASCENDING)], name="note_user_journal_idx"),
                IndexModel([("user_id", ASCENDING), ("tag_ids", ASCENDING)], name="note_user_tags_idx"),
            ],
            self.tags_collection: [
                IndexModel([("user_id", ASCENDING)], name="tag_user_id_idx"),
            ],
        }

        for collection, indexes in collections_with_indexes.items():
            try:
                await collection.create_indexes(indexes)
                logger.info(f"[DB_INIT] Indexes ensured for: {collection.name}")
            except Exception as e:
                logger.error(f"[DB_ERROR] Index creation for {collection.name}: {e}")

    def close(self):
        if self.client:
            self.client.close()
