from typing import NamedTuple, Optional
import os

from fastapi import Header, HTTPException
from dotenv import load_dotenv

load_dotenv()


class Scope(NamedTuple):
    company_id: str
    godown_id: str


def get_scope(
    x_company_id: Optional[str] = Header(None, alias="X-Company-ID"),
    x_godown_id: Optional[str] = Header(None, alias="X-Godown-ID"),
) -> Scope:
    """Resolve the company/godown every ledger row is scoped to.

    Headers win; otherwise DEFAULT_COMPANY_ID / DEFAULT_GODOWN_ID from the
    environment are used.
    """
    company_id = x_company_id or os.getenv("DEFAULT_COMPANY_ID")
    godown_id = x_godown_id or os.getenv("DEFAULT_GODOWN_ID")
    if not company_id or not godown_id:
        raise HTTPException(status_code=400, detail="X-Company-ID and X-Godown-ID headers are required")
    return Scope(company_id=company_id, godown_id=godown_id)


def get_user_identifier(x_user_id: Optional[str] = Header(None, alias="X-User-ID")) -> str:
    return x_user_id or "system"
