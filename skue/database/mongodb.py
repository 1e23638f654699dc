"""
MongoDB persistence for skue resources.
"""

from typing import Any, Dict, List, Optional, Type, TYPE_CHECKING, TypeVar

from pymongo import AsyncMongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from shared.errors import ConflictError, NotFoundError, StartupError, StoreError
from shared.logging import get_logger

from ..cache.aside import CacheAside, cache_key
from ..interfaces import DatabasePersistor
from ..models import Resource

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector

T = TypeVar("T", bound=Resource)


class MongoDBPersistor:
    """
    Connection handle to a MongoDB server and the collection-level operations
    the resource persistors are built on.

    Connection parameters come from the environment (see
    ``shared.config.BaseConfig``): ``MG_DB_ADDRESS``, ``MG_DB_USER``,
    ``MG_DB_PASS`` and ``MG_DB_DBNAME``. The client is created on first use and
    shared by every operation; the driver pools connections internally.
    """

    def __init__(
        self,
        address: str,
        username: Optional[str],
        password: Optional[str],
        database: str,
        *,
        timeout_ms: int = 5000,
        metrics: Optional["MetricsCollector"] = None,
        client: Optional[AsyncMongoClient] = None,
    ):
        self.address = address
        self.username = username
        self.password = password
        self.database = database
        self.timeout_ms = timeout_ms
        self.metrics = metrics
        self.logger = get_logger("skue.database.mongodb")
        self._client = client

    def _get_client(self) -> AsyncMongoClient:
        if self._client is None:
            self._client = AsyncMongoClient(
                self.address,
                username=self.username or None,
                password=self.password or None,
                authSource=self.database,
                serverSelectionTimeoutMS=self.timeout_ms,
                connectTimeoutMS=self.timeout_ms,
            )
        return self._client

    def collection(self, name: str):
        return self._get_client()[self.database][name]

    async def start(self):
        """Connect and ping the server. An unreachable server stops the service from starting."""
        try:
            await self._get_client().admin.command("ping")
        except PyMongoError as e:
            self.logger.error("Failed to connect to MongoDB", address=self.address, error=str(e))
            raise StartupError("mongodb", str(e)) from e

        self.logger.info("MongoDB persistence started", address=self.address, database=self.database)

    async def stop(self):
        if self._client is not None:
            await self._client.close()
            self._client = None
            self.logger.info("MongoDB persistence stopped")

    async def health_check(self) -> bool:
        try:
            await self._get_client().admin.command("ping")
            return True
        except PyMongoError:
            return False

    def _record(self, collection: str, operation: str, outcome: str):
        if self.metrics:
            self.metrics.record_store_operation(collection, operation, outcome)

    async def insert(self, collection: str, document: Dict[str, Any]) -> None:
        """Save ``document`` into ``collection``."""
        try:
            await self.collection(collection).insert_one(document)
        except DuplicateKeyError as e:
            self._record(collection, "insert", "conflict")
            raise ConflictError(str(e)) from e
        except PyMongoError as e:
            self._record(collection, "insert", "error")
            self.logger.error("Insert failed", collection=collection, error=str(e))
            raise StoreError(str(e)) from e
        self._record(collection, "insert", "ok")

    async def find_one(self, collection: str, id_field: str, resource_id: Any) -> Dict[str, Any]:
        """Return the document whose ``id_field`` equals ``resource_id``."""
        try:
            document = await self.collection(collection).find_one({id_field: resource_id})
        except PyMongoError as e:
            self._record(collection, "find_one", "error")
            self.logger.error("Read failed", collection=collection, error=str(e))
            raise StoreError(str(e)) from e

        if document is None:
            self._record(collection, "find_one", "not_found")
            raise NotFoundError()
        self._record(collection, "find_one", "ok")
        return document

    async def replace(self, collection: str, id_field: str, resource_id: Any, document: Dict[str, Any]) -> None:
        """Replace the whole document keyed by ``id_field``."""
        try:
            result = await self.collection(collection).replace_one({id_field: resource_id}, document)
        except PyMongoError as e:
            self._record(collection, "replace", "error")
            self.logger.error("Update failed", collection=collection, error=str(e))
            raise StoreError(str(e)) from e

        if result.matched_count == 0:
            self._record(collection, "replace", "not_found")
            raise NotFoundError()
        self._record(collection, "replace", "ok")

    async def remove(self, collection: str, id_field: str, resource_id: Any) -> None:
        """Delete the document keyed by ``id_field``. Removing an absent id is not an error."""
        try:
            await self.collection(collection).delete_one({id_field: resource_id})
        except PyMongoError as e:
            self._record(collection, "remove", "error")
            self.logger.error("Delete failed", collection=collection, error=str(e))
            raise StoreError(str(e)) from e
        self._record(collection, "remove", "ok")

    async def find(
        self,
        collection: str,
        query: Optional[Dict[str, Any]] = None,
        limit: int = 25,
        skip: int = 0,
    ) -> List[Dict[str, Any]]:
        """Fetch up to ``limit`` documents in natural order, starting at ``skip``."""
        try:
            cursor = self.collection(collection).find(query or {}).skip(skip).limit(limit)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            self._record(collection, "find", "error")
            self.logger.error("List failed", collection=collection, error=str(e))
            raise StoreError(str(e)) from e
        self._record(collection, "find", "ok")
        return documents

    async def count(self, collection: str) -> int:
        """Number of documents in ``collection``."""
        try:
            return await self.collection(collection).count_documents({})
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def drop(self, collection: str) -> None:
        """Remove every document from ``collection``."""
        try:
            await self.collection(collection).delete_many({})
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def create_index(self, collection: str, field: str, unique: bool = False) -> None:
        """Index ``field`` of ``collection``; a unique index turns duplicate inserts into ConflictError."""
        try:
            await self.collection(collection).create_index(field, unique=unique)
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def drop_indexes(self, collection: str) -> None:
        """Drop the secondary indexes of ``collection``, keeping the native ``_id`` one."""
        coll = self.collection(collection)
        try:
            indexes = await coll.index_information()
            for name in indexes:
                if not name.startswith("_id"):
                    await coll.drop_index(name)
        except PyMongoError as e:
            raise StoreError(str(e)) from e


class MongoCollectionPersistor(DatabasePersistor[T]):
    """CRUD over the collection of one resource type, shadowed by a cache."""

    def __init__(self, mongo: MongoDBPersistor, model: Type[T], cache: Optional[CacheAside] = None):
        self.mongo = mongo
        self.model = model
        self.cache = cache if cache is not None else CacheAside(None)

    @property
    def collection(self) -> str:
        return self.model.collection

    def _key(self, stored_id: Any) -> str:
        # Keyed by the canonical public id so every spelling of an id shares one entry
        return cache_key(self.collection, self.model.public_id(stored_id))

    def _stored_id(self, resource_id: str) -> Any:
        try:
            return self.model.storage_id(resource_id)
        except ValueError as e:
            raise NotFoundError() from e

    async def create(self, resource: T) -> T:
        stored_id = self.model.storage_id(resource.resource_id)

        async def insert() -> T:
            await self.mongo.insert(self.collection, resource.to_document())
            return resource

        return await self.cache.write(self._key(stored_id), insert)

    async def fetch(self, resource_id: str) -> T:
        stored_id = self._stored_id(resource_id)

        async def load() -> T:
            document = await self.mongo.find_one(self.collection, self.model.id_field, stored_id)
            return self.model.from_document(document)

        return await self.cache.read(self._key(stored_id), load, self.model)

    async def update(self, resource: T, resource_id: str) -> T:
        stored_id = self._stored_id(resource_id)
        resource = resource.with_id(self.model.public_id(stored_id))

        async def replace() -> T:
            await self.mongo.replace(self.collection, self.model.id_field, stored_id, resource.to_document())
            return resource

        return await self.cache.write(self._key(stored_id), replace)

    async def remove(self, resource_id: str) -> None:
        try:
            stored_id = self.model.storage_id(resource_id)
        except ValueError:
            return

        async def delete() -> None:
            await self.mongo.remove(self.collection, self.model.id_field, stored_id)

        await self.cache.invalidate(self._key(stored_id), delete)

    async def list(self, limit: int, skip: int = 0) -> List[T]:
        documents = await self.mongo.find(self.collection, None, limit=limit, skip=skip)
        return [self.model.from_document(document) for document in documents]
