# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The Supabase client is built once in the application lifespan (app/main.py)
# and stored on app.state; every service receives it from here.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings, get_settings
from core.services.account_service import AccountService
from core.services.folder_service import FolderService
from core.services.log_service import OperationLogService
from core.services.report_service import ReportService
from core.services.upload_service import UploadService
from lib.supabase_client import SupabaseClient


def get_supabase_client(request: Request) -> SupabaseClient:
    """
    Get the Supabase client built at startup.
    """
    return request.app.state.supabase


# Type aliases for dependency injection
SupabaseDep = Annotated[SupabaseClient, Depends(get_supabase_client)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_upload_service(supabase: SupabaseDep, settings: SettingsDep) -> UploadService:
    return UploadService(supabase, settings)


def get_folder_service(supabase: SupabaseDep, settings: SettingsDep) -> FolderService:
    return FolderService(supabase, settings)


def get_log_service(supabase: SupabaseDep, settings: SettingsDep) -> OperationLogService:
    return OperationLogService(supabase, settings)


def get_account_service(supabase: SupabaseDep, settings: SettingsDep) -> AccountService:
    return AccountService(supabase, settings)


def get_report_service(supabase: SupabaseDep, settings: SettingsDep) -> ReportService:
    return ReportService(supabase, settings)


UploadServiceDep = Annotated[UploadService, Depends(get_upload_service)]
FolderServiceDep = Annotated[FolderService, Depends(get_folder_service)]
LogServiceDep = Annotated[OperationLogService, Depends(get_log_service)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
