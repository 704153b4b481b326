"""
Users API - submission endpoint and user record management.

A submitted form is persisted as a User row. Duplicate emails are rejected
with 409 so clients can tell them apart from invalid payloads (400).
"""
from typing import Optional, List
from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from dynaform.db import crud
from dynaform.db.crud import UniqueConstraintViolation
from dynaform.db.database import get_db
from dynaform.db.enums import Gender
from dynaform.db.models import User
from dynaform.core.exceptions import ConflictError, NotFoundError
from dynaform.core.logging import submission_logger

router = APIRouter()

EMAIL_EXISTS = "Email already exists"
EMAIL_MAX_LENGTH = 50


def _check_email_length(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > EMAIL_MAX_LENGTH:
        raise ValueError(f"String should have at most {EMAIL_MAX_LENGTH} characters")
    return value


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserCreate(_CamelModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    gender: Gender
    love_react_flag: bool = False

    @field_validator("email")
    @classmethod
    def email_length(cls, value):
        return _check_email_length(value)


class UserUpdate(_CamelModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    gender: Optional[Gender] = None
    love_react_flag: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def email_length(cls, value):
        return _check_email_length(value)


class UserResponse(_CamelModel):
    id: int
    full_name: str
    email: str
    gender: str
    love_react_flag: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class DeleteResponse(BaseModel):
    message: str
    id: int


def _user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        full_name=user.full_name,
        email=user.email,
        gender=user.gender,
        love_react_flag=bool(user.love_react_flag),
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


async def _get_user_or_404(db: AsyncSession, user_id: int) -> User:
    user = await crud.get_user(db, user_id)
    if not user:
        raise NotFoundError("User", user_id)
    return user


@router.get("", response_model=List[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db)):
    users = await crud.list_users(db)
    return [_user_to_response(u) for u in users]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    user = await _get_user_or_404(db, user_id)
    return _user_to_response(user)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, db: AsyncSession = Depends(get_db)):
    """
    Persist a form submission.
    """
    try:
        user = await crud.create_user(
            db,
            full_name=payload.full_name,
            email=payload.email,
            gender=payload.gender.value,
            love_react_flag=payload.love_react_flag,
        )
    except UniqueConstraintViolation:
        submission_logger.warning("Rejected duplicate email", email=payload.email)
        raise ConflictError(EMAIL_EXISTS)

    await db.commit()
    submission_logger.info("Stored", user_id=user.id)
    return _user_to_response(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
):
    user = await _get_user_or_404(db, user_id)

    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    if "gender" in changes:
        changes["gender"] = Gender(changes["gender"]).value

    try:
        user = await crud.update_user(db, user, **changes)
    except UniqueConstraintViolation:
        raise ConflictError(EMAIL_EXISTS)

    await db.commit()
    await db.refresh(user)
    submission_logger.info("Updated", user_id=user.id, fields=sorted(changes))
    return _user_to_response(user)


@router.delete("/{user_id}", response_model=DeleteResponse)
async def delete_user(user_id: int, db: AsyncSession = Depends(get_db)):
    user = await _get_user_or_404(db, user_id)
    await crud.delete_user(db, user)
    await db.commit()
    submission_logger.info("Deleted", user_id=user_id)
    return {
        "message": f"User with ID {user_id} has been deleted successfully",
        "id": user_id,
    }
