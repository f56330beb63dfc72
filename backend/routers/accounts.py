from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List
import logging

from crud import accounts as crud_accounts
from crud.errors import LedgerError
from database import get_db
from models.accounts import AccountTransaction as AccountTransactionModel
from schemas.accounts import Account, AccountCreate, AccountTransaction
from utils.http_errors import to_http_exception
from utils.scope import Scope, get_scope, get_user_identifier

router = APIRouter(prefix="/accounts", tags=["Accounts"])
logger = logging.getLogger("accounts")


@router.post("/", response_model=Account, status_code=status.HTTP_201_CREATED)
def create_account(
    account: AccountCreate,
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
    user_id: str = Depends(get_user_identifier),
):
    """Open a cash or bank account that vendor payments can be drawn from."""
    try:
        db_account = crud_accounts.create_account(db, scope, account.name, account.account_type, account.opening_balance, user_id)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise to_http_exception(e, "create account")
    db.refresh(db_account)
    logger.info(f"Account '{db_account.name}' ({db_account.account_type.value}) opened with {db_account.balance} by {user_id} for {scope.company_id}/{scope.godown_id}")
    return db_account


@router.get("/", response_model=List[Account])
def read_accounts(db: Session = Depends(get_db), scope: Scope = Depends(get_scope)):
    return crud_accounts.list_accounts(db, scope)


@router.get("/{account_id}/transactions", response_model=List[AccountTransaction])
def read_account_transactions(
    account_id: int,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    scope: Scope = Depends(get_scope),
):
    """Debits and credits on an account, newest first."""
    try:
        crud_accounts.get_account(db, scope, account_id)
    except LedgerError as e:
        raise to_http_exception(e, f"read transactions for account {account_id}")
    return (
        db.query(AccountTransactionModel)
        .filter(AccountTransactionModel.account_id == account_id)
        .order_by(AccountTransactionModel.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
