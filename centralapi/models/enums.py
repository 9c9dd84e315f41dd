"""Enumerations shared by the ORM rows and the API contracts.

Values are stored as plain strings in the database so new members only
need an additive code change.
"""

from enum import StrEnum


class UserType(StrEnum):
    CL_ADMIN = "CL_ADMIN"
    HARBINGER = "HARBINGER"
    CLIENT = "CLIENT"


class UserRole(StrEnum):
    ADMIN = "ADMIN"
    AGENT = "AGENT"
    OWNER = "OWNER"


class UserStatus(StrEnum):
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"


class Status(StrEnum):
    """Approval status of an image or a collection."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ImageTag(StrEnum):
    HERO_IMAGE = "HERO_IMAGE"
    FLOOR_PLAN = "FLOOR_PLAN"
    MASTER_BEDROOM = "MASTER_BEDROOM"
    BEDROOM = "BEDROOM"
    BATHROOM = "BATHROOM"
    ENSUITE = "ENSUITE"
    LIVING_ROOM = "LIVING_ROOM"
    DINNING_ROOM = "DINNING_ROOM"
    FRONT = "FRONT"
    BACK = "BACK"
    FRONT_YARD = "FRONT_YARD"
    BACK_YARD = "BACK_YARD"
    POOL = "POOL"
    OFFICE = "OFFICE"
    GARAGE = "GARAGE"
    OTHER = "OTHER"


REVIEWER_TYPES = frozenset({UserType.CL_ADMIN, UserType.HARBINGER})
