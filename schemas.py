from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr


# ===== AUTH =====
# Fields are optional so a missing one reaches the service and is reported
# as "All fields are required" instead of a schema error.
class RegisterIn(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class LoginIn(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MessageOut(BaseModel):
    message: str


class TokenOut(MessageOut):
    token: str


class ProfileOut(MessageOut):
    user: UserOut


# ===== EXPENSES =====
class ExpenseIn(BaseModel):
    title: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None


class ExpenseUpdate(BaseModel):
    """Partial update; only the fields present in the request body are applied."""

    title: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class ExpenseOut(BaseModel):
    id: int
    user_id: int
    title: str
    amount: float
    category: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ExpenseEnvelope(MessageOut):
    expense: ExpenseOut


class ExpenseListOut(MessageOut):
    count: int
    expenses: List[ExpenseOut]


class MonthTotal(BaseModel):
    month: str
    total: float


class SummaryOut(MessageOut):
    total: float
    count: int
    by_category: Dict[str, float]
    by_month: List[MonthTotal]
