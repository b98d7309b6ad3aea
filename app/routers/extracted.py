# =============================================================================
# app/routers/extracted.py - Extracted Folder Endpoints
# =============================================================================
# Folders produced by zip extraction, and the "mark done" transition that
# moves a folder to the completed bucket.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse

from app.auth import get_operator
from app.dependencies import FolderServiceDep, LogServiceDep
from core.models.logs import Operator
from core.models.storage import FolderStage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_extracted_folders(folders: FolderServiceDep):
    """
    List extracted folders with their extraction date (null if unknown).
    """
    stage = FolderStage.EXTRACTED
    return {
        "folders": [
            {"name": folder.name, stage.timestamp_key: folder.timestamp}
            for folder in folders.list_folders(stage)
        ]
    }


@router.get("/{folder}/list")
async def list_extracted_files(
    folder: Annotated[str, Path(description="Folder name")],
    folders: FolderServiceDep,
):
    """
    List the files inside an extracted folder.
    """
    return {"files": folders.list_files(FolderStage.EXTRACTED, folder)}


@router.post("/{folder}/done")
async def mark_folder_done(
    folder: Annotated[str, Path(description="Folder name")],
    folders: FolderServiceDep,
    logs: LogServiceDep,
    operator: Operator = Depends(get_operator),
):
    """
    Move a folder from the extracted bucket to the completed bucket.

    Returns 200 when every object moved (or the folder was already empty).
    Returns 207 when some objects could not be copied; those stay in the
    extracted bucket and are listed under `failed`.
    """
    result = folders.mark_done(folder)

    if result.moved:
        logs.log_action(operator, f"Marked folder {result.folder} as done ({len(result.moved)} files)")

    body = {"ok": result.ok, **result.model_dump(by_alias=True)}
    body["failed"] = [item.model_dump() for item in result.failed]
    return JSONResponse(status_code=200 if result.ok else 207, content=body)
