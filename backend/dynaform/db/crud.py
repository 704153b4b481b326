"""
Data access for form fields and user submissions.

Uniqueness violations are reported as UniqueConstraintViolation so callers can
tell a duplicate apart from any other persistence failure without looking at
driver-specific error codes.
"""
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dynaform.db.models import FormField, User
from dynaform.core.logging import db_logger


class UniqueConstraintViolation(Exception):
    """A write would duplicate a value in a unique column."""

    def __init__(self, column: str, value):
        self.column = column
        self.value = value
        super().__init__(f"{column} already exists: {value}")


# ============================================================================
# Form fields
# ============================================================================

async def list_form_fields(db: AsyncSession) -> List[FormField]:
    result = await db.execute(select(FormField).order_by(FormField.id.asc()))
    return list(result.scalars().all())


async def get_form_field(db: AsyncSession, field_id: int) -> Optional[FormField]:
    result = await db.execute(select(FormField).where(FormField.id == field_id))
    return result.scalar_one_or_none()


async def count_form_fields(db: AsyncSession) -> int:
    return await db.scalar(select(func.count(FormField.id))) or 0


async def create_form_field(db: AsyncSession, **values) -> FormField:
    field = FormField(**values)
    db.add(field)
    await db.flush()
    await db.refresh(field)
    return field


async def update_form_field(db: AsyncSession, field: FormField, **values) -> FormField:
    for key, value in values.items():
        setattr(field, key, value)
    await db.flush()
    await db.refresh(field)
    return field


async def delete_form_field(db: AsyncSession, field: FormField) -> None:
    await db.delete(field)
    await db.flush()


# ============================================================================
# Users
# ============================================================================

async def list_users(db: AsyncSession) -> List[User]:
    result = await db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
    return list(result.scalars().all())


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def _ensure_email_available(db: AsyncSession, email: str, exclude_id: Optional[int] = None) -> None:
    existing = await get_user_by_email(db, email)
    if existing is not None and existing.id != exclude_id:
        raise UniqueConstraintViolation("email", email)


async def _flush_user(db: AsyncSession, user: User) -> User:
    """Flush a pending user write, translating a lost uniqueness race."""
    email = user.email
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        # Another writer may have taken the email between the check and the flush
        if await get_user_by_email(db, email) is not None:
            db_logger.warning("Lost uniqueness race on users.email", email=email)
            raise UniqueConstraintViolation("email", email)
        raise
    await db.refresh(user)
    return user


async def create_user(
    db: AsyncSession,
    full_name: str,
    email: str,
    gender: str,
    love_react_flag: bool = False,
) -> User:
    await _ensure_email_available(db, email)
    user = User(
        full_name=full_name,
        email=email,
        gender=gender,
        love_react_flag=love_react_flag,
    )
    db.add(user)
    return await _flush_user(db, user)


async def update_user(db: AsyncSession, user: User, **values) -> User:
    email = values.get("email")
    if email is not None and email != user.email:
        await _ensure_email_available(db, email, exclude_id=user.id)
    for key, value in values.items():
        setattr(user, key, value)
    return await _flush_user(db, user)


async def delete_user(db: AsyncSession, user: User) -> None:
    await db.delete(user)
    await db.flush()
