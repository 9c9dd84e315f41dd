"""Role and ownership predicates shared by services and routes."""

from __future__ import annotations

from centralapi.models.db import Collection, User
from centralapi.models.enums import REVIEWER_TYPES, UserType


def is_admin(user: User) -> bool:
    return user.user_type == UserType.CL_ADMIN


def is_harbinger(user: User) -> bool:
    return user.user_type == UserType.HARBINGER


def is_admin_or_harbinger(user: User) -> bool:
    return user.user_type in REVIEWER_TYPES


def is_admin_or_self(user: User, user_id: int) -> bool:
    return is_admin(user) or user.id == user_id


def owns_collection(user: User, collection: Collection) -> bool:
    return collection.user_id == user.id


def is_admin_or_owner(user: User, collection: Collection) -> bool:
    return is_admin(user) or owns_collection(user, collection)


def can_access(user: User, collection: Collection) -> bool:
    """Reviewers see every collection; everyone else only their own."""
    return is_admin_or_harbinger(user) or owns_collection(user, collection)
