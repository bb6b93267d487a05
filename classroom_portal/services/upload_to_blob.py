import logging
import re
import uuid
from typing import Dict, List, Optional

from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient
from fastapi import HTTPException, UploadFile, status

from classroom_portal.core.config import get_settings

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "image/jpeg",
    "image/png",
}
MAX_FILE_SIZE = 10 * 1024 * 1024
MAX_FILES = 5

ASSIGNMENTS_FOLDER = "assignments"
SUBMISSIONS_FOLDER = "submissions"


def sanitize_filename(filename: str) -> str:
    return re.sub(r"[^a-zA-Z0-9.-]", "_", filename or "file")


def validate_upload(file: UploadFile, file_bytes: bytes):
    if file.content_type not in ALLOWED_MIME_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Only PDF, Word, Text, and Image files are allowed."
        )
    if len(file_bytes) > MAX_FILE_SIZE:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File {file.filename} exceeds the 10MB limit"
        )


async def upload_to_blob(file: UploadFile, file_bytes: bytes, folder: str) -> str:
    settings = get_settings()
    blob_name = f"{folder}/{uuid.uuid4()}_{sanitize_filename(file.filename)}"
    try:
        async with BlobServiceClient.from_connection_string(settings.storage_account_connection_string) as blob_service_client:
            async with blob_service_client.get_blob_client(container=settings.blob_container_name, blob=blob_name) as blob_client:
                await blob_client.upload_blob(file_bytes, overwrite=True,
                    content_settings=ContentSettings(content_type=file.content_type)
                )
                return blob_client.url
    except Exception as e:
        logger.exception("Blob upload failed for %s", blob_name)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to upload file to Azure Blob Storage: {str(e)}"
        )


async def upload_files(files: Optional[List[UploadFile]], folder: str) -> List[Dict]:
    """
    Validate and upload a batch of multipart files.

    Every file is checked before any upload starts, so a rejected batch
    leaves nothing behind in storage.

    :returns: one descriptor per file: ``{filename, path, mimetype, size}``
        where ``path`` is the blob URL
    """
    files = [file for file in (files or []) if file.filename]
    if len(files) > MAX_FILES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {MAX_FILES} files can be uploaded at once"
        )

    contents = []
    for file in files:
        file_bytes = await file.read()
        validate_upload(file, file_bytes)
        contents.append((file, file_bytes))

    uploaded = []
    for file, file_bytes in contents:
        url = await upload_to_blob(file, file_bytes, folder)
        uploaded.append({
            "filename": file.filename,
            "path": url,
            "mimetype": file.content_type,
            "size": len(file_bytes),
        })
    return uploaded
