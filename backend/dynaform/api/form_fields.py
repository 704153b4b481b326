"""
Form Fields API - field definition store and config delivery

Provides:
- CRUD for field definitions (administration)
- Read-only config endpoint consumed by form clients

Field definitions describe data only; rendering and validation happen in the
client from these definitions.
"""
from typing import Optional, List
from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field, AliasChoices
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from dynaform.db import crud
from dynaform.db.database import get_db
from dynaform.db.enums import FieldType, OPTION_FIELD_TYPES
from dynaform.db.models import FormField
from dynaform.core.exceptions import BadRequestError, NotFoundError
from dynaform.core.logging import field_logger


router = APIRouter()


# ============================================================================
# Pydantic Schemas
# ============================================================================

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FormFieldCreate(_CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    field_type: FieldType
    min_length: Optional[int] = Field(None, ge=0)
    max_length: Optional[int] = Field(None, ge=0)
    default_value: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = Field(
        None, validation_alias=AliasChoices("options", "listOfValues")
    )


class FormFieldUpdate(_CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    field_type: Optional[FieldType] = None
    min_length: Optional[int] = Field(None, ge=0)
    max_length: Optional[int] = Field(None, ge=0)
    default_value: Optional[str] = None
    required: Optional[bool] = None
    options: Optional[List[str]] = Field(
        None, validation_alias=AliasChoices("options", "listOfValues")
    )


class FormFieldResponse(_CamelModel):
    id: int
    name: str
    field_type: str
    min_length: Optional[int]
    max_length: Optional[int]
    default_value: Optional[str]
    required: bool
    options: List[str] = []
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class FormConfigResponse(BaseModel):
    data: List[dict]


class DeleteResponse(BaseModel):
    message: str
    id: int


# ============================================================================
# Helper Functions
# ============================================================================

def _field_type_value(field: FormField) -> str:
    return field.field_type.value if hasattr(field.field_type, 'value') else field.field_type


def _field_to_response(field: FormField) -> FormFieldResponse:
    """Convert FormField model to response schema."""
    return FormFieldResponse(
        id=field.id,
        name=field.name,
        field_type=_field_type_value(field),
        min_length=field.min_length,
        max_length=field.max_length,
        default_value=field.default_value,
        required=field.required,
        options=field.list_of_values or [],
        created_at=field.created_at,
        updated_at=field.updated_at,
    )


def _field_to_config(field: FormField) -> dict:
    """Sparse config entry: unset, zero and empty attributes are left out."""
    entry = {
        "id": field.id,
        "name": field.name,
        "fieldType": _field_type_value(field),
    }
    if field.min_length:
        entry["minLength"] = field.min_length
    if field.max_length:
        entry["maxLength"] = field.max_length
    if field.default_value:
        entry["defaultValue"] = field.default_value
    entry["required"] = bool(field.required)
    if field.list_of_values:
        entry["options"] = list(field.list_of_values)
    return entry


def _check_definition(
    field_type: FieldType,
    min_length: Optional[int],
    max_length: Optional[int],
    options: Optional[List[str]],
) -> None:
    """Enforce the field definition invariants."""
    if FieldType(field_type) in OPTION_FIELD_TYPES and not options:
        raise BadRequestError(f"Fields of type {FieldType(field_type).value} need at least one option")
    if min_length is not None and max_length is not None and min_length > max_length:
        raise BadRequestError("minLength cannot be greater than maxLength")


async def _get_field_or_404(db: AsyncSession, field_id: int) -> FormField:
    field = await crud.get_form_field(db, field_id)
    if not field:
        raise NotFoundError("FormField", field_id)
    return field


# ============================================================================
# Config Endpoint
# ============================================================================

@router.get("/config", response_model=FormConfigResponse)
async def get_form_config(db: AsyncSession = Depends(get_db)):
    """
    Ordered field definitions for rendering a form.
    """
    fields = await crud.list_form_fields(db)
    return {"data": [_field_to_config(f) for f in fields]}


# ============================================================================
# CRUD Endpoints
# ============================================================================

@router.get("", response_model=List[FormFieldResponse])
async def list_form_fields(db: AsyncSession = Depends(get_db)):
    fields = await crud.list_form_fields(db)
    return [_field_to_response(f) for f in fields]


@router.get("/{field_id}", response_model=FormFieldResponse)
async def get_form_field(field_id: int, db: AsyncSession = Depends(get_db)):
    field = await _get_field_or_404(db, field_id)
    return _field_to_response(field)


@router.post("", response_model=FormFieldResponse, status_code=status.HTTP_201_CREATED)
async def create_form_field(payload: FormFieldCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a field definition.
    Option fields (LIST, RADIO) must carry at least one option.
    """
    _check_definition(payload.field_type, payload.min_length, payload.max_length, payload.options)

    field = await crud.create_form_field(
        db,
        name=payload.name,
        field_type=payload.field_type,
        min_length=payload.min_length,
        max_length=payload.max_length,
        default_value=payload.default_value,
        required=payload.required,
        list_of_values=payload.options or [],
    )
    await db.commit()
    field_logger.info("Created", field_id=field.id, field_type=payload.field_type.value)
    return _field_to_response(field)


@router.put("/{field_id}", response_model=FormFieldResponse)
async def update_form_field(
    field_id: int,
    payload: FormFieldUpdate,
    db: AsyncSession = Depends(get_db),
):
    """
    Partially update a field definition.
    The merged definition has to satisfy the same invariants as a new one.
    """
    field = await _get_field_or_404(db, field_id)

    changes = payload.model_dump(exclude_unset=True)
    for key in ("name", "field_type", "required"):
        if key in changes and changes[key] is None:
            del changes[key]
    if "options" in changes:
        changes["list_of_values"] = changes.pop("options") or []

    _check_definition(
        changes.get("field_type", field.field_type),
        changes.get("min_length", field.min_length),
        changes.get("max_length", field.max_length),
        changes.get("list_of_values", field.list_of_values),
    )

    field = await crud.update_form_field(db, field, **changes)
    await db.commit()
    await db.refresh(field)
    return _field_to_response(field)


@router.delete("/{field_id}", response_model=DeleteResponse)
async def delete_form_field(field_id: int, db: AsyncSession = Depends(get_db)):
    """
    Delete a field definition.
    Submissions do not reference fields, so deletion is unconditional.
    """
    field = await _get_field_or_404(db, field_id)
    await crud.delete_form_field(db, field)
    await db.commit()
    field_logger.info("Deleted", field_id=field_id)
    return {
        "message": f"FormField with ID {field_id} has been deleted successfully",
        "id": field_id,
    }
