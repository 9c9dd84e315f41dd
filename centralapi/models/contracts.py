"""CentralAPI request/response contracts.

Responses are built from ORM rows via ``from_attributes``. Password hashes
never appear on any response model.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from centralapi.models.enums import ImageTag, Status, UserRole, UserStatus, UserType

# === Shared ===


class ErrorResponse(BaseModel):
    error: str
    message: str
    retryable: bool = False


class MessageResponse(BaseModel):
    message: str


# === Users & auth ===

BCRYPT_MAX_BYTES = 72


def _password_within_bcrypt_limit(value: str | None) -> str | None:
    # bcrypt counts bytes, not characters
    if value is not None and len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes when UTF-8 encoded")
    return value


class UserCreate(BaseModel):
    name: str | None = Field(default=None, max_length=255)
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)
    phone_number: str | None = Field(default=None, max_length=50)
    user_type: UserType = UserType.CLIENT
    user_role: UserRole = UserRole.OWNER
    property_ids: list[int] = []

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str | None) -> str | None:
        return _password_within_bcrypt_limit(value)


class UserUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    name: str | None = Field(default=None, max_length=255)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=8, max_length=72)
    phone_number: str | None = Field(default=None, max_length=50)
    user_type: UserType | None = None
    user_role: UserRole | None = None
    property_ids: list[int] | None = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str | None) -> str | None:
        return _password_within_bcrypt_limit(value)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None
    email: str
    phone_number: str | None
    user_type: UserType
    user_role: UserRole
    status: UserStatus
    property_ids: list[int] = []
    created_at: datetime | None = None


class UserCreatedResponse(BaseModel):
    message: str = "User created successfully"
    id: int


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AuthenticationResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    email: str
    name: str | None
    role: UserRole
    user_type: UserType
    id: int


# === Collections ===


class CollectionCreate(BaseModel):
    property_description: str = Field(min_length=1)
    property_address: str = Field(min_length=1, max_length=500)
    collection_code: str = Field(min_length=1, max_length=100)
    property_size: int = Field(ge=0, default=0)
    property_owner_id: int | None = None
    bedrooms: int = Field(ge=0, le=50, default=0)
    bathrooms: int = Field(ge=0, le=50, default=0)
    parking_spaces: int | None = Field(default=None, ge=0)
    property_type: str = Field(min_length=1, max_length=50)
    image_urls: list[str] = []


class CollectionUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    property_description: str | None = Field(default=None, min_length=1)
    property_address: str | None = Field(default=None, min_length=1, max_length=500)
    collection_code: str | None = Field(default=None, min_length=1, max_length=100)
    property_size: int | None = Field(default=None, ge=0)
    property_owner_id: int | None = None
    bedrooms: int | None = Field(default=None, ge=0, le=50)
    bathrooms: int | None = Field(default=None, ge=0, le=50)
    parking_spaces: int | None = Field(default=None, ge=0)
    property_type: str | None = Field(default=None, min_length=1, max_length=50)
    image_urls: list[str] | None = None
    approval_status: Status | None = None


class CollectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    property_description: str
    property_address: str
    collection_code: str
    property_size: int
    property_owner_id: int | None
    bedrooms: int
    bathrooms: int
    parking_spaces: int | None
    property_type: str
    image_urls: list[str] = []
    approval_status: Status
    created_at: datetime | None = None
    updated_at: datetime | None = None


# === Images ===


class ImageUpdate(BaseModel):
    """Partial update; status and rejection reason are reviewer-only."""

    image_tag: ImageTag | None = None
    custom_tag: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    description_summary: str | None = Field(default=None, max_length=500)
    instance_number: int | None = Field(default=None, ge=1)
    image_status: Status | None = None
    rejection_reason: str | None = Field(default=None, max_length=500)


class ImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    image_id: str
    collection_id: int
    image_url: str
    upload_time: datetime | None = None
    image_tag: ImageTag
    custom_tag: str | None
    instance_number: int
    image_status: Status
    rejection_reason: str | None
    description: str | None
    description_summary: str | None
    ai_tag: str | None
    ai_confidence: float | None
    content_type: str
    size_bytes: int


class ImageUploadResponse(BaseModel):
    message: str = "Image uploaded successfully"
    url: str
    image_id: str
    collection_status: Status


class DownloadUrlResponse(BaseModel):
    url: str
    expires_in: int


class ClassificationResult(BaseModel):
    """Body returned by the external classification endpoint."""

    tag: str
    confidence: float = Field(ge=0, le=1)
