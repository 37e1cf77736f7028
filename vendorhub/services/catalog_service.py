"""
vendorhub/services/catalog_service.py

Purpose: Owner-scoped CRUD for catalog records (products and services)

- One service class, parameterized by CatalogKind
- Every read, update and delete filters on the owner's userId
- A record owned by someone else looks exactly like a missing record
- Updates are patches: fields not supplied are left untouched
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo.errors import PyMongoError

from vendorhub.core.exceptions import (
    ResourceNotFoundError,
    StorageError,
    UpdateFailedError,
    ValidationError,
)
from vendorhub.core.logging import get_logger, LogContext
from vendorhub.models.catalog import ATTACHMENT_FIELDS, OWNER_FIELD, CatalogKind
from vendorhub.services.attachment_service import StoredHandles
from vendorhub.services.ownership_service import OwnershipGuard
from vendorhub.utils.constants import (
    NO_RECORDS_FOUND,
    RECORD_NOT_FOUND,
    RECORD_NOT_FOUND_FOR_DELETE,
    RECORD_NOT_FOUND_FOR_EDIT,
    RECORD_UPDATE_FAILED,
)
from vendorhub.utils.validation_utils import parse_object_id

logger = get_logger(__name__)


def _coerce_handles(field: str, values) -> List[ObjectId]:
    """
    Attachment lists arrive as hex strings over JSON; store them as ObjectIds.

    Raises:
        ValidationError: A value is not an attachment id
    """
    if values is None:
        return []
    coerced = []
    for value in values:
        object_id = parse_object_id(value)
        if object_id is None:
            raise ValidationError(
                f"{field} must contain attachment ids",
                details={"field": field, "value": str(value)}
            )
        coerced.append(object_id)
    return coerced


class CatalogService:
    """
    CRUD over one catalog collection.

    Args:
        collection: Mongo collection holding records of this kind
        kind: CatalogKind describing field names and labels
    """

    def __init__(self, collection, kind: CatalogKind):
        self.collection = collection
        self.kind = kind

    def _message(self, template: str) -> str:
        return template.format(label=self.kind.label, label_plural=f"{self.kind.name}s")

    async def create(
        self,
        owner_user_id: ObjectId,
        fields: Dict[str, Any],
        handles: Optional[StoredHandles] = None,
    ) -> ObjectId:
        """
        Inserts a new record owned by owner_user_id.

        The caller must already be resolved as a verified user; attachments
        must already be stored.
        """
        handles = handles or StoredHandles()
        document = {name: fields.get(name) for name in self.kind.fields}
        document.update(handles.as_record_fields())
        document[OWNER_FIELD] = owner_user_id

        with LogContext(user_id=owner_user_id, kind=self.kind.name):
            try:
                result = await self.collection.insert_one(document)
            except PyMongoError as e:
                logger.error(
                    f"Failed to insert {self.kind.name}; "
                    f"{len(handles.images) + len(handles.videos)} stored attachment(s) left orphaned",
                    exc_info=True
                )
                raise StorageError(f"Failed to insert {self.kind.name}") from e

            logger.info(f"{self.kind.label} created: {result.inserted_id}")
            return result.inserted_id

    async def list_by_owner(self, owner_user_id: ObjectId) -> List[Dict[str, Any]]:
        """
        Returns every record owned by owner_user_id.

        Raises:
            ResourceNotFoundError: Zero records, for kinds that report an
                empty listing as not found
        """
        cursor = self.collection.find({OWNER_FIELD: owner_user_id})
        records = await cursor.to_list(length=None)

        if not records and self.kind.empty_list_not_found:
            raise ResourceNotFoundError(self._message(NO_RECORDS_FOUND))

        return records

    async def get_by_id(
        self,
        record_id: str,
        owner_user_id: ObjectId,
        not_found_message: str = RECORD_NOT_FOUND,
    ) -> Dict[str, Any]:
        """
        Returns a record the caller owns.

        Raises:
            ResourceNotFoundError: Missing, malformed id, or owned by someone else
        """
        object_id = parse_object_id(record_id)
        if object_id is None:
            raise ResourceNotFoundError(self._message(not_found_message))

        record = await self.collection.find_one({"_id": object_id, OWNER_FIELD: owner_user_id})
        if not record:
            raise ResourceNotFoundError(self._message(not_found_message))

        return OwnershipGuard.authorize_owned(owner_user_id, record)

    async def update(
        self,
        record_id: str,
        owner_user_id: ObjectId,
        partial_fields: Dict[str, Any],
    ) -> None:
        """
        Applies the supplied fields over an owned record.

        Raises:
            ResourceNotFoundError: Record missing or not owned
            ValidationError: images/videos hold something other than attachment ids
            UpdateFailedError: Nothing was modified (including identical values)
        """
        record = await self.get_by_id(record_id, owner_user_id, RECORD_NOT_FOUND_FOR_EDIT)

        changes = {
            name: value
            for name, value in partial_fields.items()
            if name in self.kind.updatable_fields
        }
        for name in ATTACHMENT_FIELDS:
            if name in changes:
                changes[name] = _coerce_handles(name, changes[name])

        with LogContext(user_id=owner_user_id, record_id=record["_id"], kind=self.kind.name):
            if not changes:
                logger.info(f"{self.kind.label} update carried no fields")
                raise UpdateFailedError(self._message(RECORD_UPDATE_FAILED))

            result = await self.collection.update_one(
                {"_id": record["_id"], OWNER_FIELD: owner_user_id},
                {"$set": changes}
            )

            if result.modified_count == 0:
                logger.warning(f"{self.kind.label} update modified nothing")
                raise UpdateFailedError(self._message(RECORD_UPDATE_FAILED))

            logger.info(f"{self.kind.label} updated: {sorted(changes)}")

    async def delete(self, record_id: str, owner_user_id: ObjectId) -> None:
        """
        Deletes an owned record. Its attachments stay in the bucket.

        Raises:
            ResourceNotFoundError: Record missing or not owned
        """
        object_id = parse_object_id(record_id)
        if object_id is None:
            raise ResourceNotFoundError(self._message(RECORD_NOT_FOUND_FOR_DELETE))

        result = await self.collection.delete_one({"_id": object_id, OWNER_FIELD: owner_user_id})
        if result.deleted_count == 0:
            raise ResourceNotFoundError(self._message(RECORD_NOT_FOUND_FOR_DELETE))

        with LogContext(user_id=owner_user_id, record_id=object_id, kind=self.kind.name):
            logger.info(f"{self.kind.label} deleted; attachments left in the bucket")
