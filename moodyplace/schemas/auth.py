"""Схемы для аутентификации и управления администраторами."""
from typing import Annotated

from pydantic import AliasChoices, BaseModel, EmailStr, Field, StringConstraints, ValidationInfo, field_validator

from moodyplace.utils.enums import Role
from moodyplace.utils.validators import (
    PASSWORD_POLICY_MESSAGE,
    is_strong_password,
    is_valid_person_name,
    is_valid_username,
)

TrimmedIdentifier = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=255)]


class LoginRequest(BaseModel):
    """Вход по имени пользователя или email."""

    username_or_email: TrimmedIdentifier = Field(
        ..., validation_alias=AliasChoices("username_or_email", "usernameOrEmail", "username")
    )
    password: str = Field(..., min_length=1, max_length=255)


class RefreshRequest(BaseModel):
    """Обмен refresh токена на новую пару."""

    refresh_token: str = Field(..., min_length=1, validation_alias=AliasChoices("refresh_token", "refreshToken"))


class ChangePasswordRequest(BaseModel):
    """Смена пароля текущего администратора."""

    current_password: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("current_password", "currentPassword")
    )
    new_password: str = Field(..., validation_alias=AliasChoices("new_password", "newPassword"))
    confirm_password: str = Field(..., validation_alias=AliasChoices("confirm_password", "confirmPassword"))

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v):
        if not is_strong_password(v):
            raise ValueError(
                "New password must be at least 8 characters with uppercase, lowercase, number, and special character"
            )
        return v

    @field_validator("confirm_password")
    @classmethod
    def validate_confirmation(cls, v, info: ValidationInfo):
        if v != info.data.get("new_password"):
            raise ValueError("Password confirmation does not match")
        return v


class CreateAdminRequest(BaseModel):
    """Создание администратора (только super_admin)."""

    username: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=50)]
    email: EmailStr
    password: str
    full_name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=255)] = Field(
        ..., validation_alias=AliasChoices("full_name", "fullName")
    )
    role: Role = Role.EDITOR

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        if not is_valid_username(v):
            raise ValueError("Username can only contain letters, numbers, underscores, and hyphens")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if not is_strong_password(v):
            raise ValueError(PASSWORD_POLICY_MESSAGE)
        return v

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v):
        if not is_valid_person_name(v):
            raise ValueError("Full name can only contain letters, spaces, hyphens, apostrophes, and periods")
        return v

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        if v not in (Role.ADMIN, Role.EDITOR):
            raise ValueError("Role must be admin or editor")
        return v


class UpdateRoleRequest(BaseModel):
    """Изменение роли администратора."""

    role: Role
