"""
RouteDemo: Upload Route Handler
===============================

What:  Handles POST /upload, which stores one multipart file.
How:   Parses the form, pulls out the `file` field, and hands it to UploadService.
       `register_upload_routes` declares the route on a RouteGroup.

Request Flow:
    1. Client sends multipart/form-data with a 'file' field
    2. extract_upload() returns the file or raises ValidationError (400)
    3. The received filename is logged
    4. UploadService.save() validates the name and writes the file
    5. Return 200 text/plain: '<filename>' uploaded!

Error responses (handled by global exception handlers):
    HTTP 400: missing/invalid field or unsafe filename (ValidationError)
    HTTP 413: file over the size limit, if one is set (PayloadTooLargeError)
    HTTP 500: write failure (FileStorageError)
"""

import logging

from fastapi import Depends, Request
from fastapi.responses import PlainTextResponse

from routedemo.routing import RouteGroup
from routedemo.schemas import ErrorResponse
from routedemo.services.upload_service import UploadService, extract_upload

logger = logging.getLogger(__name__)


def get_upload_service(request: Request) -> UploadService:
    """Dependency returning the UploadService attached to the running app."""
    return request.app.state.upload_service


async def upload_file(
    request: Request,
    service: UploadService = Depends(get_upload_service),
) -> PlainTextResponse:
    """
    Store the file sent in the multipart field `file`.

    The form is read from the request directly so a missing or non-file
    field becomes a 400 with a specific reason instead of the framework's
    generic 422.
    """
    form = await request.form()
    try:
        upload = extract_upload(form)
        logger.info("Received upload: filename=%r", upload.filename)
        await service.save(upload)
    finally:
        await form.close()

    return PlainTextResponse(f"'{upload.filename}' uploaded!")


_UPLOAD_RESPONSES = {
    200: {"description": "File stored", "content": {"text/plain": {"example": "'a.txt' uploaded!"}}},
    400: {"description": "Missing file field or unsafe filename", "model": ErrorResponse},
    413: {"description": "File over MAX_UPLOAD_SIZE, when set", "model": ErrorResponse},
    500: {"description": "File could not be written", "model": ErrorResponse},
}


def register_upload_routes(routes: RouteGroup) -> RouteGroup:
    """Declare POST /upload on `routes`."""
    routes.post(
        "/upload",
        upload_file,
        response_class=PlainTextResponse,
        responses=_UPLOAD_RESPONSES,
        summary="Upload a single file",
    )
    return routes
