import logging

from fastapi import APIRouter, Depends, HTTPException

from ..config.database import get_database
from ..schemas.account import AccountResponse, AmountRequest, CreateAccountRequest, TransferRequest, TransferResponse
from ..services import banking

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", status_code=201, response_model=AccountResponse)
async def create_account(request: CreateAccountRequest, db=Depends(get_database)):
    try:
        return await banking.create_account(db, request)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to open account: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to open account: {str(e)}")


@router.post("/transfer", response_model=TransferResponse)
async def transfer(request: TransferRequest, db=Depends(get_database)):
    """Move funds between two accounts in a single transaction"""
    try:
        return await banking.transfer(db, request)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Transfer {request.from_username} -> {request.to_username} failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Transfer failed: {str(e)}")


@router.get("/{username}", response_model=AccountResponse)
async def get_account(username: str, db=Depends(get_database)):
    try:
        return await banking.get_account(db, username)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch account {username}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to fetch account: {str(e)}")


@router.post("/{username}/deposit", response_model=AccountResponse)
async def deposit(username: str, request: AmountRequest, db=Depends(get_database)):
    try:
        return await banking.deposit(db, username, request.amount)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Deposit to {username} failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Deposit failed: {str(e)}")


@router.post("/{username}/withdraw", response_model=AccountResponse)
async def withdraw(username: str, request: AmountRequest, db=Depends(get_database)):
    try:
        return await banking.withdraw(db, username, request.amount)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Withdrawal from {username} failed: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Withdrawal failed: {str(e)}")
