"""
Finance Routes - Profile and financial intake

Endpoints:
- PUT  /api/profile              - Save name, currency and time zone
- GET  /api/accounts             - List accounts
- POST /api/accounts             - Create an account
- POST /api/transactions/import  - Import CSV-derived transaction rows
"""

import logging

from fastapi import APIRouter, Depends, status

from lifeos.dashboard.backend.dependencies import get_current_user, get_momentum_manager
from lifeos.dashboard.backend.models import (
    AccountCreate,
    AccountResponse,
    ProfileResponse,
    ProfileUpdate,
    TransactionImport,
    TransactionImportResult,
)
from lifeos.finance import intake
from lifeos.momentum.manager import MomentumManager


logger = logging.getLogger(__name__)

router = APIRouter()


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    request: ProfileUpdate,
    user: dict = Depends(get_current_user),
    momentum: MomentumManager = Depends(get_momentum_manager),
):
    """Save profile settings, creating the user (with starter tasks) if needed."""
    momentum.ensure_user(user["user_id"])
    profile = intake.update_profile(
        user["user_id"],
        name=request.name,
        currency=request.currency,
        time_zone=request.time_zone,
    )
    return ProfileResponse(**profile.to_dict())


@router.get("/accounts", response_model=list[AccountResponse])
async def list_accounts(user: dict = Depends(get_current_user)):
    return [AccountResponse(**row) for row in intake.list_accounts(user["user_id"])]


@router.post("/accounts", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(request: AccountCreate, user: dict = Depends(get_current_user)):
    """Create an account. The profile must be saved first."""
    row = intake.create_account(
        user["user_id"], request.label, request.type, request.starting_balance
    )
    return AccountResponse(**row)


@router.post("/transactions/import", response_model=TransactionImportResult)
async def import_transactions(request: TransactionImport, user: dict = Depends(get_current_user)):
    count = intake.import_transactions(
        user["user_id"], request.transactions, account_id=request.account_id
    )
    return TransactionImportResult(success=True, count=count)
