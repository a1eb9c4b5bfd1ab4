"""Admin Log Domain Entity"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from sqlmodel import Field, Column
from sqlalchemy import JSON
from src.domain.base import BaseModel, BigIntPK, utcnow


class AdminAction(str, Enum):
    ADJUST_BALANCE = "adjust_balance"
    CHANGE_PLAN = "change_plan"
    CREATE_COUPON = "create_coupon"
    SET_COUPON_ACTIVE = "set_coupon_active"


class AdminLog(BaseModel, table=True):
    """
    Admin Log - Audit record of one administrator operation

    Domain Rules:
    - Append-only, written in the same store transaction as the operation
    - target_account_id is empty for operations not aimed at an account
      (coupon management)
    """

    __tablename__ = "admin_logs"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigIntPK, primary_key=True, autoincrement=True)
    )

    admin_id: str = Field(index=True, description="Administrator who acted")

    action: AdminAction = Field(description="Operation performed")

    target_account_id: Optional[str] = Field(
        default=None,
        index=True,
        description="Account the operation applied to"
    )

    details: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_column=Column(JSON, nullable=True),
        description="Operation parameters and outcome"
    )

    created_at: datetime = Field(default_factory=utcnow)
