"""
vendorhub/api/catalog.py

Purpose: Owner-scoped catalog endpoints

- /vendor/products and /vendor/services, built from one router factory
- POST takes multipart form fields plus repeated "files" parts
- Every route resolves the verified caller before touching records
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from vendorhub.api.deps import catalog_service_for, get_attachment_service, get_current_user
from vendorhub.core.config import settings
from vendorhub.core.exceptions import PayloadTooLargeError, ValidationError
from vendorhub.core.logging import get_logger
from vendorhub.models.catalog import CatalogKind, PRODUCT, SERVICE
from vendorhub.schemas.catalog import UPDATE_SCHEMAS, serialize_document
from vendorhub.services.attachment_service import AttachmentService, IncomingFile, StoredHandles
from vendorhub.services.catalog_service import CatalogService
from vendorhub.utils.constants import (
    FILE_TOO_LARGE,
    RECORD_DELETED,
    RECORD_INSERTED,
    RECORD_UPDATED,
)

logger = get_logger(__name__)

READ_CHUNK_SIZE = 1024 * 1024


async def read_upload(upload: UploadFile, max_bytes: int) -> IncomingFile:
    """
    Reads one uploaded file, refusing anything over max_bytes.

    Raises:
        PayloadTooLargeError: The file exceeds the ceiling
    """
    buffer = bytearray()
    while True:
        chunk = await upload.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        buffer.extend(chunk)
        if len(buffer) > max_bytes:
            raise PayloadTooLargeError(
                FILE_TOO_LARGE.format(limit_mb=max_bytes // (1024 * 1024)),
                details={"filename": upload.filename}
            )

    return IncomingFile(
        filename=upload.filename or "upload",
        content_type=upload.content_type,
        data=bytes(buffer),
    )


def _form_value(form, name: str):
    # Only "files" may carry uploads; a file part under a record field is ignored
    values = [value for value in form.getlist(name) if not isinstance(value, UploadFile)]
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return values


async def parse_create_request(request: Request, kind: CatalogKind, max_bytes: int):
    """
    Splits a create request into record fields and uploaded files.

    Multipart forms carry files; a JSON body is accepted for records
    without attachments.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as e:
            raise ValidationError("Request body is not valid JSON") from e
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return {name: body.get(name) for name in kind.fields}, []

    form = await request.form()
    try:
        fields = {name: _form_value(form, name) for name in kind.fields}
        files: List[IncomingFile] = []
        for item in form.getlist("files"):
            if isinstance(item, UploadFile):
                files.append(await read_upload(item, max_bytes))
    finally:
        await form.close()

    return fields, files


def build_catalog_router(kind: CatalogKind) -> APIRouter:
    """
    Creates the CRUD routes for one catalog kind.
    """
    router = APIRouter(prefix=f"/vendor/{kind.name}s")
    get_catalog_service = catalog_service_for(kind)
    update_schema = UPDATE_SCHEMAS[kind.name]

    @router.post("", status_code=201)
    async def create_record(
        request: Request,
        caller: Dict[str, Any] = Depends(get_current_user),
        attachments: AttachmentService = Depends(get_attachment_service),
        catalog: CatalogService = Depends(get_catalog_service),
    ):
        fields, files = await parse_create_request(request, kind, settings.max_upload_bytes)

        handles = await attachments.store_batch(files, caller["_id"]) if files else StoredHandles()
        record_id = await catalog.create(caller["_id"], fields, handles)

        return {
            "message": RECORD_INSERTED.format(label=kind.label),
            kind.id_key: str(record_id),
        }

    @router.get("")
    async def list_records(
        caller: Dict[str, Any] = Depends(get_current_user),
        catalog: CatalogService = Depends(get_catalog_service),
    ):
        records = await catalog.list_by_owner(caller["_id"])
        return serialize_document(records)

    @router.get("/{record_id}")
    async def get_record(
        record_id: str,
        caller: Dict[str, Any] = Depends(get_current_user),
        catalog: CatalogService = Depends(get_catalog_service),
    ):
        record = await catalog.get_by_id(record_id, caller["_id"])
        return serialize_document(record)

    @router.put("/{record_id}")
    async def update_record(
        record_id: str,
        payload: update_schema,
        caller: Dict[str, Any] = Depends(get_current_user),
        catalog: CatalogService = Depends(get_catalog_service),
    ):
        await catalog.update(record_id, caller["_id"], payload.supplied_fields())
        return {"message": RECORD_UPDATED.format(label=kind.label)}

    @router.delete("/{record_id}")
    async def delete_record(
        record_id: str,
        caller: Dict[str, Any] = Depends(get_current_user),
        catalog: CatalogService = Depends(get_catalog_service),
    ):
        await catalog.delete(record_id, caller["_id"])
        return {"message": RECORD_DELETED.format(label=kind.label)}

    return router


products_router = build_catalog_router(PRODUCT)
services_router = build_catalog_router(SERVICE)
