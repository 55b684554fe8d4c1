"""
Ledger account schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .user import USERNAME_PATTERN


class CreateAccountRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=20)
    balance: float = Field(0, ge=0, description="Opening balance")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        v = v.strip().lower()
        if not USERNAME_PATTERN.match(v):
            raise ValueError("Username can only contain letters and numbers")
        return v


class AmountRequest(BaseModel):
    amount: float = Field(..., gt=0)


class TransferRequest(BaseModel):
    from_username: str = Field(..., min_length=1)
    to_username: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)

    @field_validator("from_username", "to_username")
    @classmethod
    def normalize_username(cls, v):
        return v.strip().lower()


class AccountResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    username: str
    balance: float
    created_at: datetime
    updated_at: Optional[datetime] = None


class TransferResponse(BaseModel):
    from_account: AccountResponse
    to_account: AccountResponse
    amount: float
