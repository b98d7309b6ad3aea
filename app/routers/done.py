# =============================================================================
# app/routers/done.py - Completed Folder Endpoints
# =============================================================================
# Folders that were marked done: overview, file listing and deletion.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.auth import get_operator
from app.dependencies import FolderServiceDep, LogServiceDep
from core.models.logs import Operator
from core.models.storage import FolderStage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_completed_folders(folders: FolderServiceDep):
    """
    List completed folders with their completion date (null if unknown).
    """
    stage = FolderStage.COMPLETED
    return {
        "folders": [
            {"name": folder.name, stage.timestamp_key: folder.timestamp}
            for folder in folders.list_folders(stage)
        ]
    }


@router.get("/{folder}/list")
async def list_completed_files(
    folder: Annotated[str, Path(description="Folder name")],
    folders: FolderServiceDep,
):
    """
    List the files inside a completed folder (completion metadata hidden).
    """
    return {"files": folders.list_files(FolderStage.COMPLETED, folder)}


@router.delete("/{folder}/delete")
async def delete_completed_folder(
    folder: Annotated[str, Path(description="Folder name")],
    folders: FolderServiceDep,
    logs: LogServiceDep,
    operator: Operator = Depends(get_operator),
):
    """
    Delete every object of a completed folder.

    Returns 404 if the folder has no objects.
    """
    removed = folders.delete_completed(folder)
    logs.log_action(operator, f"Deleted completed folder {folder}")

    return {
        "success": True,
        "message": f"Folder '{folder}' deleted ({removed} files)",
        "removed": removed,
    }
