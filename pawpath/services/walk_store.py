"""
Walk storage for saved routes, using MongoDB as the persistence layer.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection

from pawpath.config import Settings, settings
from pawpath.models.walk import WalkRecord

logger = logging.getLogger(__name__)


class WalkStore(ABC):
    """Persistent store for walk records"""

    @abstractmethod
    def insert_walk(self, walk: WalkRecord) -> WalkRecord:
        """Persist a walk and return it with its stored id and timestamp"""
        pass

    def close(self) -> None:
        pass


class MongoWalkStore(WalkStore):
    """Walk store backed by a MongoDB collection"""

    def __init__(
        self,
        mongo_uri: Optional[str] = None,
        database_name: Optional[str] = None,
        collection_name: Optional[str] = None,
        client: Optional[MongoClient] = None,
        config: Settings = settings,
    ):
        self.mongo_uri = mongo_uri or config.mongo_uri
        self.database_name = database_name or config.mongo_db_name
        self.collection_name = collection_name or config.mongo_walks_collection

        # MongoClient connects lazily, so construction never blocks on the server
        self.client = client or MongoClient(self.mongo_uri, serverSelectionTimeoutMS=2000)
        self.collection: Collection = self.client[self.database_name][self.collection_name]
        self._indexes_ready = False

    def _init_collection(self) -> None:
        """Create indexes that support frequent query patterns."""
        if self._indexes_ready:
            return
        self.collection.create_index("owner_id")
        self.collection.create_index("created_at")
        self._indexes_ready = True

    def insert_walk(self, walk: WalkRecord) -> WalkRecord:
        self._init_collection()

        document = walk.model_dump(exclude={"id"})
        document["created_at"] = datetime.now(timezone.utc)

        result = self.collection.insert_one(document)
        logger.info("Stored walk %s for owner %s", result.inserted_id, walk.owner_id)

        return walk.model_copy(
            update={"id": str(result.inserted_id), "created_at": document["created_at"]}
        )

    def close(self) -> None:
        self.client.close()
