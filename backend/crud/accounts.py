import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from crud.errors import AccountNotFoundError
from models.accounts import Account, AccountTransaction, AccountType, TransactionType
from utils.formatting import to_money
from utils.scope import Scope

logger = logging.getLogger(__name__)


def create_account(db: Session, scope: Scope, name: str, account_type: AccountType, opening_balance: Decimal, user_id: str) -> Account:
    account = Account(
        company_id=scope.company_id,
        godown_id=scope.godown_id,
        name=name,
        account_type=account_type,
        balance=to_money(opening_balance),
        created_by=user_id,
    )
    db.add(account)
    db.flush()
    return account


def get_account(db: Session, scope: Scope, account_id: int, for_update: bool = False) -> Account:
    query = db.query(Account).filter(
        Account.id == account_id,
        Account.company_id == scope.company_id,
        Account.godown_id == scope.godown_id,
    )
    if for_update:
        query = query.with_for_update()
    account = query.first()
    if account is None:
        raise AccountNotFoundError(account_id)
    return account


def list_accounts(db: Session, scope: Scope) -> List[Account]:
    return db.query(Account).filter(
        Account.company_id == scope.company_id,
        Account.godown_id == scope.godown_id,
    ).order_by(Account.name.asc()).all()


def post_transaction(
    db: Session,
    scope: Scope,
    account_id: int,
    txn_type: TransactionType,
    amount: Decimal,
    category: str,
    reference: Optional[str] = None,
    user_id: Optional[str] = None,
) -> AccountTransaction:
    """Record a debit (money out) or credit (money in) and move the account balance."""
    account = get_account(db, scope, account_id, for_update=True)
    amount = to_money(amount)
    if txn_type == TransactionType.DEBIT:
        account.balance = to_money(account.balance) - amount
    else:
        account.balance = to_money(account.balance) + amount

    txn = AccountTransaction(
        account_id=account.id,
        company_id=scope.company_id,
        godown_id=scope.godown_id,
        txn_type=txn_type,
        amount=amount,
        category=category,
        reference=reference,
        created_by=user_id,
    )
    db.add(txn)
    db.flush()
    logger.info(f"{txn_type.value.title()} of {amount} on account {account.id} ({category}); balance now {account.balance}")
    return txn
