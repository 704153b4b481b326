"""
Idempotent seeding of the sample form definition.

Runs at application startup (when SEED_ON_STARTUP is set) and manually with:

  python -m dynaform.services.seeding [--force]

Seeding is skipped when any field definition already exists unless --force is
given, in which case the existing definitions are replaced.
"""
import argparse
import asyncio
from typing import List

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from dynaform.db import crud
from dynaform.db.database import create_tables, session_scope
from dynaform.db.enums import FieldType
from dynaform.db.models import FormField
from dynaform.core.logging import seed_logger

SAMPLE_FIELDS = [
    {
        "name": "Full Name",
        "field_type": FieldType.text,
        "min_length": 1,
        "max_length": 100,
        "default_value": "John Doe",
        "required": True,
    },
    {
        "name": "Email",
        "field_type": FieldType.text,
        "min_length": 1,
        "max_length": 50,
        "default_value": "hello@mail.com",
        "required": True,
    },
    {
        "name": "Gender",
        "field_type": FieldType.list,
        "default_value": "1",
        "required": True,
        "list_of_values": ["Male", "Female", "Others"],
    },
    {
        "name": "Love React?",
        "field_type": FieldType.radio,
        "default_value": "1",
        "required": True,
        "list_of_values": ["Yes", "No"],
    },
]


async def seed_form_fields(db: AsyncSession, force: bool = False) -> List[FormField]:
    """
    Insert the sample field definitions.

    Returns the created rows; an empty list means seeding was skipped.
    """
    existing = await crud.count_form_fields(db)
    if existing and not force:
        seed_logger.info("Form fields already exist, skipping seed", count=existing)
        return []

    if existing:
        await db.execute(delete(FormField))
        seed_logger.warning("Removed existing form fields before reseeding", count=existing)

    created = []
    for values in SAMPLE_FIELDS:
        created.append(await crud.create_form_field(db, **values))
    await db.commit()

    seed_logger.info("Form fields seeded", count=len(created))
    return created


async def run_all_seeds(force: bool = False) -> int:
    await create_tables()
    async with session_scope() as db:
        created = await seed_form_fields(db, force=force)
    return len(created)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Seed the sample form field definitions")
    parser.add_argument("--force", action="store_true", help="replace existing field definitions")
    args = parser.parse_args(argv)

    count = asyncio.run(run_all_seeds(force=args.force))
    print(f"Seeding complete. Created: {count}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
