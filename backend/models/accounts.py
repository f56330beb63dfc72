from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin, now_ist


class AccountType(enum.Enum):
    CASH = "cash"
    BANK = "bank"


class TransactionType(enum.Enum):
    DEBIT = "debit"
    CREDIT = "credit"


class Account(Base, TimestampMixin):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(String, nullable=False, index=True)
    godown_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    account_type = Column(Enum(AccountType), default=AccountType.CASH, nullable=False)
    balance = Column(Numeric(14, 2), default=0, server_default='0', nullable=False)

    transactions = relationship("AccountTransaction", back_populates="account", order_by="AccountTransaction.id")


class AccountTransaction(Base):
    __tablename__ = "account_transactions"

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    company_id = Column(String, nullable=False)
    godown_id = Column(String, nullable=False)
    txn_type = Column(Enum(TransactionType), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    category = Column(String, nullable=False)  # e.g. "kabadiwala payment"
    reference = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_ist)
    created_by = Column(String, nullable=True)

    account = relationship("Account", back_populates="transactions")
