#!/usr/bin/env python

"""
    User management for Cautela.

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

import logging
from sqlalchemy.exc import SQLAlchemyError
from cautela.core import auth
from cautela.core.models import User
from cautela.core.permissions import Role
from cautela.core.exceptions import (
    ConflictError,
    DatabaseInsertError,
    DuplicateError,
    SelfDeleteError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "phone", "document", "rank", "war_name",
    "military_organization", "function_name",
)


def _commit(session, action):
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to {action}: {e}")
        raise DatabaseInsertError(f"Failed to {action}: {str(e)}.")


def _ensure_unique_email(session, email, exclude_id=None):
    existing = User.get_by_email(session, email)
    if existing and existing.id != exclude_id:
        raise DuplicateError("User already exists")


def list_users(session):
    return session.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


def get_user(session, user_id):
    if user := session.get(User, user_id):
        return user
    raise UserNotFoundError()


def register_user(session, data):
    """Self registration; new accounts are always COMMON."""
    _ensure_unique_email(session, data.email)
    user = User(
        name=data.name,
        email=data.email.strip().lower(),
        password_hash=auth.hash_password(data.password),
        role=Role.COMMON,
    )
    session.add(user)
    _commit(session, "register user")
    logger.info(f"User {user.email} registered")
    return user


def create_user(session, data):
    _ensure_unique_email(session, data.email)
    user = User(
        name=data.name,
        email=data.email.strip().lower(),
        password_hash=auth.hash_password(data.password),
        role=data.role,
        # Blank profile fields are stored as NULL
        **{field: getattr(data, field) or None for field in PROFILE_FIELDS},
    )
    session.add(user)
    _commit(session, "create user")
    logger.info(f"User {user.email} created with role {user.role.value}")
    return user


def update_user(session, user_id, data):
    user = get_user(session, user_id)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("email"):
        changes["email"] = changes["email"].strip().lower()
        _ensure_unique_email(session, changes["email"], exclude_id=user_id)
    for field, value in changes.items():
        if field in PROFILE_FIELDS:
            value = value or None
        elif value is None:
            continue
        setattr(user, field, value)
    _commit(session, "update user")
    return user


def delete_user(session, claims, user_id):
    if claims.user_id == user_id:
        raise SelfDeleteError()
    user = get_user(session, user_id)
    if user.loans:
        raise ConflictError("User has loans and cannot be deleted")
    session.delete(user)
    _commit(session, "delete user")
    logger.warning(f"User {user_id} deleted by user {claims.user_id}")


def reset_password(session, user_id):
    """Sets a random password and returns (user, new_password)."""
    user = get_user(session, user_id)
    new_password = auth.generate_password()
    user.password_hash = auth.hash_password(new_password)
    _commit(session, "reset password")
    logger.info(f"Password reset for user {user_id}")
    return user, new_password
