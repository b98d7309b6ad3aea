# =============================================================================
# app/routers/accounts.py - User Account Endpoints
# =============================================================================
# Form-based account management with optional profile photo upload.
# Password hashes are never returned.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile
from pydantic import ValidationError as PydanticValidationError

from app.auth import get_operator
from app.dependencies import AccountServiceDep, LogServiceDep
from app.exceptions import ValidationError
from core.models.account import AccountCreate, AccountUpdate
from core.models.logs import Operator
from core.services.account_service import ProfilePhoto

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Helper Functions
# =============================================================================

async def _read_photo(profile: UploadFile | None) -> ProfilePhoto | None:
    """Turn an optional upload into a ProfilePhoto (None if nothing was sent)."""
    if profile is None or not profile.filename:
        return None
    content = await profile.read()
    if not content:
        return None
    return ProfilePhoto(profile.filename, content, profile.content_type)


def _build(model, **fields):
    try:
        return model(**fields)
    except PydanticValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ValidationError(
            "Missing required fields",
            suggestion="full_name, username and password are required",
            details={"fields": missing},
        )


# =============================================================================
# Endpoints
# =============================================================================

@router.get("")
async def list_accounts(accounts: AccountServiceDep):
    """All accounts, newest first."""
    return {"users": [a.model_dump(mode="json") for a in accounts.list_accounts()]}


@router.get("/{user_id}")
async def get_account(
    user_id: Annotated[str, Path(description="Account id")],
    accounts: AccountServiceDep,
):
    """One account."""
    return accounts.get_account(user_id).model_dump(mode="json")


@router.post("/create", status_code=201)
async def create_account(
    accounts: AccountServiceDep,
    logs: LogServiceDep,
    full_name: Annotated[str, Form()] = "",
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    address: Annotated[str | None, Form()] = None,
    email: Annotated[str | None, Form()] = None,
    contact_number: Annotated[str | None, Form()] = None,
    gender: Annotated[str | None, Form()] = None,
    profile: Annotated[UploadFile | None, File()] = None,
    operator: Operator = Depends(get_operator),
):
    """
    Create an account. full_name, username and password are required.
    """
    account = _build(
        AccountCreate,
        full_name=full_name,
        username=username,
        password=password,
        address=address,
        email=email,
        contact_number=contact_number,
        gender=gender,
    )

    created = accounts.create_account(account, photo=await _read_photo(profile))
    logs.log_action(operator, f"Created account {account.username}")
    return created.model_dump(mode="json")


@router.post("/edit/{user_id}")
async def update_account(
    user_id: Annotated[str, Path(description="Account id")],
    accounts: AccountServiceDep,
    logs: LogServiceDep,
    full_name: Annotated[str, Form()] = "",
    username: Annotated[str, Form()] = "",
    password: Annotated[str | None, Form()] = None,
    address: Annotated[str | None, Form()] = None,
    email: Annotated[str | None, Form()] = None,
    contact_number: Annotated[str | None, Form()] = None,
    gender: Annotated[str | None, Form()] = None,
    profile: Annotated[UploadFile | None, File()] = None,
    operator: Operator = Depends(get_operator),
):
    """
    Update an account. Leave password blank to keep the current one.
    """
    changes = _build(
        AccountUpdate,
        full_name=full_name,
        username=username,
        password=password,
        address=address,
        email=email,
        contact_number=contact_number,
        gender=gender,
    )

    updated = accounts.update_account(user_id, changes, photo=await _read_photo(profile))
    logs.log_action(operator, f"Updated account {changes.username}")
    return updated.model_dump(mode="json")


@router.post("/delete/{user_id}")
async def delete_account(
    user_id: Annotated[str, Path(description="Account id")],
    accounts: AccountServiceDep,
    logs: LogServiceDep,
    operator: Operator = Depends(get_operator),
):
    """Delete an account and its profile photo."""
    deleted = accounts.delete_account(user_id)
    logs.log_action(operator, f"Deleted account {deleted.username or user_id}")
    return {"success": True, "message": f"Account {user_id} deleted"}
