"""Registration, login and profile lookup."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from errors import AuthError, ConflictError, InternalError, InvalidCredentialsError, ValidationError
from models import User
from security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def register_user(db: Session, name, email, password) -> User:
    if not name or not email or not password:
        raise ValidationError("All fields are required")

    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise ConflictError("User already exists")

    user = User(name=name, email=email, hashed_password=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent registration won the unique constraint
        db.rollback()
        raise ConflictError("User already exists")
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Could not store new user")
        raise InternalError() from exc

    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def authenticate_user(db: Session, email, password) -> str:
    """Check the credentials and return a fresh access token."""
    if not email or not password:
        raise ValidationError("All fields are required")

    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.hashed_password):
        logger.info("Failed login attempt")
        raise InvalidCredentialsError()

    logger.info("User %s logged in", user.id)
    return create_access_token(user.id)


def get_profile(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise AuthError("User not found")
    return user
