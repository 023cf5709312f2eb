"""Profile field rules and username uniqueness checks."""

import enum
from typing import Any

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator
from sqlalchemy import func
from sqlalchemy.orm import Session

from src.db.models import Profile

NAME_PATTERN = r"^[a-zA-Z0-9\s.]+$"
USERNAME_PATTERN = r"^[a-zA-Z0-9-]+$"

_http_url = TypeAdapter(HttpUrl)


class ProfileValidationErrorType(str, enum.Enum):
    USERNAME_TAKEN = "USERNAME_TAKEN"
    INVALID_FORMAT = "INVALID_FORMAT"
    REQUIRED_FIELD = "REQUIRED_FIELD"


class ProfileValidationError(Exception):
    """Field-level profile errors; rendered as {"success": false, "errors": {...}}."""

    def __init__(self, errors: dict[str, tuple[ProfileValidationErrorType, str]]):
        super().__init__("; ".join(f"{field}: {message}" for field, (_, message) in errors.items()))
        self.errors = errors

    @property
    def status_code(self) -> int:
        first_type = next(iter(self.errors.values()))[0]
        return 409 if first_type == ProfileValidationErrorType.USERNAME_TAKEN else 400

    def to_response(self) -> dict[str, Any]:
        return {
            "success": False,
            "errors": {
                field: {"type": error_type.value, "message": message}
                for field, (error_type, message) in self.errors.items()
            },
        }


MESSAGES = {
    ("name", "string_too_short"): "Name must be at least 3 characters long",
    ("name", "string_too_long"): "Name cannot exceed 50 characters",
    ("name", "string_pattern_mismatch"): "Name can only contain letters, numbers, spaces and dots",
    ("username", "string_too_short"): "Username must be at least 3 characters long",
    ("username", "string_too_long"): "Username cannot exceed 50 characters",
    ("username", "string_pattern_mismatch"): "Username can only contain letters, numbers and dashes",
    ("description", "string_too_long"): "Description cannot exceed 500 characters",
    ("avatar", "value_error"): "Avatar must be a valid URL",
}


class _ProfileFields(BaseModel):
    description: str | None = Field(default=None, max_length=500)
    avatar: str | None = None

    @field_validator("description", "avatar", mode="before")
    @classmethod
    def _empty_to_none(cls, value):
        return None if value == "" else value

    @field_validator("avatar")
    @classmethod
    def _check_avatar(cls, value):
        if value is not None:
            try:
                _http_url.validate_python(value)
            except ValidationError:
                raise ValueError("invalid url")
        return value


class ProfileCreateFields(_ProfileFields):
    name: str = Field(min_length=3, max_length=50, pattern=NAME_PATTERN)
    username: str = Field(min_length=3, max_length=50, pattern=USERNAME_PATTERN)


class ProfileUpdateFields(_ProfileFields):
    name: str | None = Field(default=None, min_length=3, max_length=50, pattern=NAME_PATTERN)
    username: str | None = Field(default=None, min_length=3, max_length=50, pattern=USERNAME_PATTERN)


def _to_profile_errors(exc: ValidationError) -> ProfileValidationError:
    errors: dict[str, tuple[ProfileValidationErrorType, str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "profile"
        if field in errors:
            continue
        if error["type"] == "missing":
            errors[field] = (ProfileValidationErrorType.REQUIRED_FIELD, f"{field.capitalize()} is required")
        else:
            message = MESSAGES.get((field, error["type"]), error["msg"])
            errors[field] = (ProfileValidationErrorType.INVALID_FORMAT, message)
    return ProfileValidationError(errors)


def validate_profile_data(data: dict[str, Any], partial: bool = False) -> dict[str, Any]:
    """Return the cleaned fields, or raise ProfileValidationError listing every bad field."""
    model = ProfileUpdateFields if partial else ProfileCreateFields
    try:
        fields = model.model_validate(data)
    except ValidationError as exc:
        raise _to_profile_errors(exc) from exc
    cleaned = fields.model_dump(exclude_unset=partial)
    if partial:
        # name and username are required columns; null means "leave as is"
        for key in ("name", "username"):
            if key in cleaned and cleaned[key] is None:
                del cleaned[key]
    return cleaned


def is_username_taken(db: Session, username: str, exclude_profile_id: str | None = None) -> bool:
    query = db.query(Profile.id).filter(func.lower(Profile.username) == username.lower())
    if exclude_profile_id:
        query = query.filter(Profile.id != exclude_profile_id)
    return query.first() is not None


def ensure_username_available(db: Session, username: str, exclude_profile_id: str | None = None) -> None:
    if is_username_taken(db, username, exclude_profile_id):
        raise ProfileValidationError(
            {"username": (ProfileValidationErrorType.USERNAME_TAKEN, "This username is already taken")}
        )
