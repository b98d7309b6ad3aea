# =============================================================================
# app/routers/upload.py - Zip Upload Endpoints
# =============================================================================
# Receives zip archives and extracts them into the extracted bucket.
# Also lists the received bucket.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from app.auth import get_operator
from app.dependencies import LogServiceDep, SettingsDep, SupabaseDep, UploadServiceDep
from app.exceptions import FileTooLargeError, ValidationError
from core.models.logs import Operator

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/upload-zip")
async def upload_zip(
    uploads: UploadServiceDep,
    logs: LogServiceDep,
    settings: SettingsDep,
    file: Annotated[UploadFile | None, File(description="Zip archive to extract")] = None,
    operator: Operator = Depends(get_operator),
):
    """
    Upload a zip archive and extract it.

    This endpoint:
    1. Validates the upload (field present, size cap)
    2. Extracts every file entry into the extracted bucket
    3. Keeps a copy of the archive in the received bucket (best-effort)

    `uploaded` lists the stored keys. Entries that failed to upload or were
    skipped by path sanitizing are reported separately.
    """
    # =========================================================================
    # 1. Validate Upload
    # =========================================================================

    if file is None:
        raise ValidationError(
            "No file attached (field name = file)",
            suggestion="Send the archive as multipart form field 'file'",
        )

    filename = file.filename or "upload.zip"
    content = await file.read()
    size_bytes = len(content)

    if size_bytes > settings.max_upload_size_bytes:
        raise FileTooLargeError(size_bytes / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

    logger.info(f"Processing upload: {filename} ({size_bytes / (1024 * 1024):.2f}MB)")

    # =========================================================================
    # 2. Extract (a corrupt archive aborts here, before anything is stored)
    # =========================================================================

    result = uploads.extract(content)

    # =========================================================================
    # 3. Keep Original
    # =========================================================================

    archived = uploads.archive_original(filename, content)

    logs.log_action(
        operator,
        f"Uploaded archive {filename} ({len(result.succeeded)} files extracted)",
    )

    return {
        "ok": True,
        "uploaded": result.succeeded,
        "failed": [item.model_dump() for item in result.failed],
        "skipped": result.skipped,
        "archived": archived,
    }


@router.get("/files")
async def list_received_files(supabase: SupabaseDep, settings: SettingsDep):
    """
    List the top level of the received bucket with public URLs.
    """
    store = supabase.bucket(settings.SUPABASE_BUCKET)
    files = [
        {**entry, "publicUrl": store.public_url(entry["name"])}
        for entry in store.list("")
        if entry.get("name")
    ]
    return {"files": files}
