from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
from models.accounts import AccountType, TransactionType


class AccountCreate(BaseModel):
    name: str = Field(..., min_length=1)
    account_type: AccountType = AccountType.CASH
    opening_balance: Decimal = Decimal("0")


class Account(BaseModel):
    id: int
    company_id: str
    godown_id: str
    name: str
    account_type: AccountType
    balance: Decimal
    created_at: datetime

    class Config:
        from_attributes = True


class AccountTransaction(BaseModel):
    id: int
    account_id: int
    txn_type: TransactionType
    amount: Decimal
    category: str
    reference: Optional[str] = None
    created_at: datetime
    created_by: Optional[str] = None

    class Config:
        from_attributes = True
