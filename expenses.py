"""Owner-scoped expense CRUD.

Every query filters on both the expense id and the caller's user id in the
same statement, so a caller can never see or touch a record it does not
own, even when it knows the record's id.
"""

import logging
import math
from typing import List

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from errors import InternalError, NotFoundError, ValidationError
from models import CATEGORIES, Expense

logger = logging.getLogger(__name__)


# ===== VALIDATION =====
def normalize_category(category) -> str:
    if not isinstance(category, str) or not category.strip():
        raise ValidationError("Category is required")
    cat = category.strip()
    for c in CATEGORIES:
        if cat.lower() == c.lower():
            return c
    raise ValidationError(f"Category must be one of: {', '.join(CATEGORIES)}")


def clean_title(title) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required")
    return title.strip()


def clean_amount(amount) -> float:
    if amount is None:
        raise ValidationError("Amount is required")
    amount = float(amount)
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError("Amount must be a positive number")
    return amount


_CLEANERS = {
    "title": clean_title,
    "amount": clean_amount,
    "category": normalize_category,
}


def _commit(db: Session, action: str):
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Could not %s expense", action)
        raise InternalError() from exc


def _get_owned(db: Session, owner_id: int, expense_id: int) -> Expense:
    exp = (
        db.query(Expense)
        .filter(Expense.id == expense_id, Expense.user_id == owner_id)
        .populate_existing()
        .first()
    )
    if not exp:
        raise NotFoundError("Expense not found")
    return exp


# ===== OPERATIONS =====
def create_expense(db: Session, owner_id: int, title, amount, category) -> Expense:
    if not title or not amount or not category:
        raise ValidationError("All fields are required")

    exp = Expense(
        user_id=owner_id,
        title=clean_title(title),
        amount=clean_amount(amount),
        category=normalize_category(category),
    )
    db.add(exp)
    _commit(db, "create")
    db.refresh(exp)
    logger.info("User %s created expense %s", owner_id, exp.id)
    return exp


def list_expenses(db: Session, owner_id: int) -> List[Expense]:
    return (
        db.query(Expense)
        .filter(Expense.user_id == owner_id)
        .order_by(Expense.created_at.desc(), Expense.id.desc())
        .all()
    )


def update_expense(db: Session, owner_id: int, expense_id: int, changes: dict) -> Expense:
    """Apply `changes` (only the fields the caller actually sent).

    A field that is present is validated like on create, so an explicit
    ``amount: 0`` is rejected instead of being mistaken for "not provided".
    """
    values = {}
    for field, value in changes.items():
        if field not in _CLEANERS:
            continue
        values[field] = _CLEANERS[field](value)

    if not values:
        return _get_owned(db, owner_id, expense_id)

    result = db.execute(
        update(Expense)
        .where(Expense.id == expense_id, Expense.user_id == owner_id)
        .values(**values)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError("Expense not found")
    _commit(db, "update")

    logger.info("User %s updated expense %s (%s)", owner_id, expense_id, ", ".join(sorted(values)))
    return _get_owned(db, owner_id, expense_id)


def delete_expense(db: Session, owner_id: int, expense_id: int) -> None:
    result = db.execute(
        delete(Expense).where(Expense.id == expense_id, Expense.user_id == owner_id)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError("Expense not found")
    _commit(db, "delete")
    logger.info("User %s deleted expense %s", owner_id, expense_id)
