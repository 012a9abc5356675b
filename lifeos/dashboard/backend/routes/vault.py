"""
Vault Route - Document storage

Endpoints:
- GET    /api/vault                     - List documents (newest first)
- POST   /api/vault                     - Upload a document (multipart form)
- GET    /api/vault/{item_id}/download  - Download a document
- DELETE /api/vault/{item_id}           - Delete a document
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from lifeos.dashboard.backend.dependencies import (
    get_current_user,
    get_momentum_manager,
    get_vault_manager,
)
from lifeos.dashboard.backend.models import VaultItemResponse
from lifeos.momentum.manager import MomentumManager
from lifeos.vault import DEFAULT_CATEGORY
from lifeos.vault.manager import VaultManager


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[VaultItemResponse])
async def list_items(
    user: dict = Depends(get_current_user),
    vault: VaultManager = Depends(get_vault_manager),
):
    return [VaultItemResponse(**item.to_dict()) for item in vault.list_items(user["user_id"])]


@router.post("", response_model=VaultItemResponse, status_code=status.HTTP_201_CREATED)
async def upload_item(
    file: UploadFile = File(...),
    category: str = Form(DEFAULT_CATEGORY),
    user: dict = Depends(get_current_user),
    vault: VaultManager = Depends(get_vault_manager),
    momentum: MomentumManager = Depends(get_momentum_manager),
):
    """
    Upload a document into the user's vault.

    The user record is created on first contact, same as the task list.
    """
    momentum.ensure_user(user["user_id"])
    data = await file.read()
    item = vault.upload_item(
        user["user_id"],
        file.filename or "",
        data,
        content_type=file.content_type,
        category=category,
    )
    return VaultItemResponse(**item.to_dict())


@router.get("/{item_id}/download")
async def download_item(
    item_id: str,
    user: dict = Depends(get_current_user),
    vault: VaultManager = Depends(get_vault_manager),
):
    item, data = vault.read_item(user["user_id"], item_id)
    return Response(
        content=data,
        media_type=item.file_type or "application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{item.title}"'},
    )


@router.delete("/{item_id}")
async def delete_item(
    item_id: str,
    user: dict = Depends(get_current_user),
    vault: VaultManager = Depends(get_vault_manager),
):
    vault.delete_item(user["user_id"], item_id)
    return {"success": True, "id": item_id}
