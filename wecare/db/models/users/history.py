# wecare/db/models/users/history.py
from typing import Any, Dict, Optional
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from datetime import datetime
from ..timestamps import timestamp_field

class AccountHistory(SQLModel, table=True):
    __tablename__ = "account_history"
    id: Optional[int] = Field(default=None, primary_key=True)
    account_id: str = Field(foreign_key="accounts.id", index=True)
    date: datetime = timestamp_field()
    category: str = Field(default="", max_length=50)
    notes: str = Field(default="")
    meta: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
