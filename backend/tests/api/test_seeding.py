import pytest

from dynaform.db import crud
from dynaform.db.enums import FieldType
from dynaform.services.seeding import SAMPLE_FIELDS, seed_form_fields

pytestmark = pytest.mark.integration


@pytest.mark.anyio
async def test_seed_creates_sample_fields(test_session):
    created = await seed_form_fields(test_session)
    assert [f.name for f in created] == ["Full Name", "Email", "Gender", "Love React?"]

    fields = await crud.list_form_fields(test_session)
    gender = fields[2]
    assert gender.field_type == FieldType.list
    assert gender.list_of_values == ["Male", "Female", "Others"]
    assert gender.default_value == "1"


@pytest.mark.anyio
async def test_seed_is_idempotent(test_session):
    await seed_form_fields(test_session)
    assert await seed_form_fields(test_session) == []
    assert await crud.count_form_fields(test_session) == len(SAMPLE_FIELDS)


@pytest.mark.anyio
async def test_forced_seed_replaces_fields(test_session):
    await crud.create_form_field(test_session, name="Leftover", field_type=FieldType.text)
    await test_session.commit()

    created = await seed_form_fields(test_session, force=True)
    assert len(created) == len(SAMPLE_FIELDS)

    names = [f.name for f in await crud.list_form_fields(test_session)]
    assert "Leftover" not in names


@pytest.mark.anyio
async def test_seeded_config_matches_sample_form(client, test_session):
    await seed_form_fields(test_session)

    data = (await client.get("/form-fields/config")).json()["data"]
    assert [(f["name"], f["fieldType"]) for f in data] == [
        ("Full Name", "TEXT"),
        ("Email", "TEXT"),
        ("Gender", "LIST"),
        ("Love React?", "RADIO"),
    ]
    assert data[3]["options"] == ["Yes", "No"]
