import logging
from contextlib import aclosing
from typing import Any, Generic, List, Mapping, Optional, Sequence, Type, TypeVar

from binmapper.config import config
from binmapper.entity.base import BaseEntity, EntityId
from binmapper.entity.registry import registry
from binmapper.store.client import (
    BatchStatus,
    Key,
    Record,
    RecordMeta,
    ScanOptions,
    StoreClient,
    WritePolicy,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseEntity)


class BaseRepository(Generic[T]):
    """
    Generic repository for one entity type stored in one (namespace, set).

    Subclasses either set the entity_type class attribute, pass entity_type
    to the constructor, or override instantiate() to build entities. An
    overridden instantiate() must accept a record holding only "id".

    Usage:
        class UserRepository(BaseRepository[User]):
            entity_type = User

        repo = UserRepository(client, "app", "users")
        user = await repo.get_or_create("u1", {"name": "Alice"})
    """

    entity_type: Optional[Type[T]] = None

    def __init__(
        self,
        client: StoreClient,
        namespace: Optional[str] = None,
        set_name: Optional[str] = None,
        entity_type: Optional[Type[T]] = None,
    ):
        self.client = client
        self.namespace = namespace or config.namespace
        self.set_name = set_name
        if entity_type is not None:
            self.entity_type = entity_type
        if not self.set_name:
            raise ValueError("set_name is required")

    def key(self, id: EntityId) -> Key:
        return Key(self.namespace, self.set_name, id)

    def entity_class(self, id: EntityId) -> Type[T]:
        """The entity type this repository maps, from entity_type or instantiate()."""
        if self.entity_type is not None:
            return self.entity_type
        return type(self.instantiate({"id": id}))

    def instantiate(self, record: Record) -> T:
        """Build an entity from a record."""
        if self.entity_type is None:
            raise NotImplementedError(
                f"{type(self).__name__} has no entity_type; set it or override instantiate()"
            )
        return self.entity_type.from_record(record)

    # =========================================================================
    # Single-record operations
    # =========================================================================

    async def get(self, id: EntityId) -> Optional[T]:
        """Get an entity by id, or None if no record exists."""
        record = await self.client.get(self.key(id))
        if record is None:
            return None
        return self.instantiate({**record, "id": id})

    async def exists(self, id: EntityId) -> bool:
        return await self.client.exists(self.key(id))

    async def save(self, entity: T, meta: Optional[RecordMeta] = None) -> None:
        """Write the full entity, creating or replacing its fields."""
        record = entity.to_record()
        logger.debug("save %s", self.key(entity.id))
        await self.client.put(self.key(entity.id), record, meta)

    async def get_or_create(self, id: EntityId, data: Optional[Mapping[str, Any]] = None) -> T:
        """
        Get an entity, creating and saving it if it does not exist.

        An existing entity is returned unchanged and data is ignored. Two
        concurrent calls for the same new id may both create it.

        Args:
            id: Entity id
            data: Initial attribute values keyed by attribute name

        Returns:
            The stored or newly created entity
        """
        entity = await self.get(id)
        if entity is not None:
            return entity

        entity = self.instantiate({"id": id})
        if data:
            entity.apply(data)
        entity.apply_defaults()

        logger.debug("create %s", self.key(id))
        await self.save(entity)
        return entity

    async def update(self, id: EntityId, data: Mapping[str, Any]) -> None:
        """
        Write only the given attributes of an existing record.

        Keys that are not declared bins are skipped. If none remain, nothing
        is written.

        Raises:
            RecordNotFoundError: if no record exists for id
        """
        bins = {}
        for descriptor in registry.lookup(self.entity_class(id)):
            if descriptor.source_name in data:
                bins[descriptor.stored_name] = data[descriptor.source_name]

        if not bins:
            logger.debug("update %s: no known fields, skipping", self.key(id))
            return

        await self.client.put(self.key(id), bins, policy=WritePolicy.UPDATE_ONLY)

    async def delete(self, id: EntityId) -> None:
        """Remove an entity. Deleting an id that does not exist is a no-op."""
        if await self.exists(id):
            await self.client.remove(self.key(id))

    # =========================================================================
    # Batch operations
    # =========================================================================

    async def get_many(self, ids: Sequence[EntityId]) -> List[T]:
        """
        Get several entities in one batch.

        Ids that are missing or fail to read are left out of the result.
        """
        if not ids:
            return []

        results = await self.client.batch_read([self.key(id) for id in ids])

        entities = []
        for result in results:
            if result.status is not BatchStatus.OK or not result.record:
                continue
            entities.append(self.instantiate({**result.record, "id": result.key.id}))
        return entities

    async def delete_many(self, ids: Sequence[EntityId]) -> None:
        if not ids:
            return
        await self.client.batch_remove([self.key(id) for id in ids])

    async def get_all(self, options: Optional[ScanOptions] = None) -> List[T]:
        """
        Get every entity in the set, in store order.

        A failure during the scan is raised and no partial result is returned.
        """
        entities = []
        async with aclosing(self.client.scan(self.namespace, self.set_name, options)) as records:
            async for record in records:
                entities.append(self.instantiate(record))
        logger.debug("scan %s:%s returned %d records", self.namespace, self.set_name, len(entities))
        return entities
