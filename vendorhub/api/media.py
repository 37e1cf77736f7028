"""
vendorhub/api/media.py

Purpose: Public attachment streaming

- GET /image/{file_id} and /video/{file_id} stream GridFS files
- Unknown ids answer 404 before any bytes are sent
"""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from vendorhub.api.deps import get_attachment_service
from vendorhub.services.attachment_service import AttachmentService
from vendorhub.utils.constants import MEDIA_IMAGE, MEDIA_VIDEO

router = APIRouter()


async def _stream(attachments: AttachmentService, file_id: str, media: str) -> StreamingResponse:
    stream = await attachments.stream_out(file_id, media)
    headers = {}
    if stream.length is not None:
        headers["Content-Length"] = str(stream.length)
    return StreamingResponse(stream.chunks, media_type=stream.content_type, headers=headers)


@router.get("/image/{file_id}")
async def get_image(file_id: str, attachments: AttachmentService = Depends(get_attachment_service)):
    return await _stream(attachments, file_id, MEDIA_IMAGE)


@router.get("/video/{file_id}")
async def get_video(file_id: str, attachments: AttachmentService = Depends(get_attachment_service)):
    return await _stream(attachments, file_id, MEDIA_VIDEO)
