"""
vendorhub/services/attachment_service.py

Purpose: Attachment storage in GridFS

- Classifies uploaded files as image or video by declared content type
- Writes each file to the GridFS bucket and collects the file ids
- Streams stored files back out chunk by chunk

Uploads are not transactional: a failure on one file leaves the files
written before it in the bucket, unreferenced. Nothing here writes catalog
records, and nothing cleans up if the caller's record insert fails.
"""

from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List, Optional

from bson import ObjectId
from gridfs.errors import NoFile
from pymongo.errors import PyMongoError

from vendorhub.core.exceptions import ResourceNotFoundError, StorageError
from vendorhub.core.logging import get_logger, LogContext
from vendorhub.utils.constants import (
    ATTACHMENT_NOT_FOUND,
    DEFAULT_CONTENT_TYPES,
    MEDIA_IMAGE,
    MEDIA_VIDEO,
)
from vendorhub.utils.validation_utils import classify_media, parse_object_id

logger = get_logger(__name__)


@dataclass
class IncomingFile:
    """An uploaded file, fully read and size-checked by the API layer."""
    filename: str
    content_type: Optional[str]
    data: bytes


@dataclass
class StoredHandles:
    images: List[ObjectId] = field(default_factory=list)
    videos: List[ObjectId] = field(default_factory=list)

    def as_record_fields(self) -> Dict[str, List[ObjectId]]:
        return {"images": list(self.images), "videos": list(self.videos)}


@dataclass
class AttachmentStream:
    content_type: str
    length: Optional[int]
    chunks: AsyncIterator[bytes]


async def _iter_chunks(grid_out) -> AsyncIterator[bytes]:
    while True:
        chunk = await grid_out.readchunk()
        if not chunk:
            break
        yield chunk


class AttachmentService:
    """
    Stores and streams catalog attachments.

    Args:
        bucket: GridFS bucket (AsyncIOMotorGridFSBucket or a fake with the
            same upload_from_stream/open_download_stream surface)
    """

    def __init__(self, bucket):
        self.bucket = bucket

    async def store_batch(self, files: List[IncomingFile], owner_user_id) -> StoredHandles:
        """
        Writes every recognised file to the bucket.

        Files that are neither image/* nor video/* are skipped without being
        stored or reported.

        Raises:
            StorageError: A write failed; earlier files stay stored
        """
        handles = StoredHandles()

        with LogContext(user_id=owner_user_id):
            for index, incoming in enumerate(files):
                media = classify_media(incoming.content_type)
                if media is None:
                    logger.info(
                        f"Skipping {incoming.filename!r}: unsupported content type {incoming.content_type!r}"
                    )
                    continue

                try:
                    file_id = await self.bucket.upload_from_stream(
                        incoming.filename or "upload",
                        incoming.data,
                        metadata={
                            "userId": owner_user_id,
                            "contentType": incoming.content_type,
                            "media": media,
                        }
                    )
                except PyMongoError as e:
                    logger.error(
                        f"Failed to store file {index + 1}/{len(files)}; "
                        f"{len(handles.images) + len(handles.videos)} earlier file(s) left orphaned",
                        exc_info=True
                    )
                    raise StorageError(
                        "Failed to store attachment",
                        details={"filename": incoming.filename}
                    ) from e

                if media == MEDIA_IMAGE:
                    handles.images.append(file_id)
                else:
                    handles.videos.append(file_id)

            logger.info(
                f"Stored {len(handles.images)} image(s) and {len(handles.videos)} video(s)"
            )

        return handles

    async def stream_out(self, handle: str, media: str = MEDIA_IMAGE) -> AttachmentStream:
        """
        Opens a stored file for streaming.

        Raises:
            ResourceNotFoundError: Unknown or malformed handle
        """
        not_found = ATTACHMENT_NOT_FOUND.format(media=media.capitalize())

        file_id = parse_object_id(handle)
        if file_id is None:
            raise ResourceNotFoundError(not_found)

        try:
            grid_out = await self.bucket.open_download_stream(file_id)
        except NoFile as e:
            logger.info(f"{media} {handle} not found")
            raise ResourceNotFoundError(not_found) from e

        metadata = grid_out.metadata or {}
        content_type = metadata.get("contentType") or DEFAULT_CONTENT_TYPES.get(
            media, "application/octet-stream"
        )
        if media == MEDIA_VIDEO and not content_type.startswith("video/"):
            content_type = DEFAULT_CONTENT_TYPES[MEDIA_VIDEO]

        return AttachmentStream(
            content_type=content_type,
            length=getattr(grid_out, "length", None),
            chunks=_iter_chunks(grid_out),
        )
