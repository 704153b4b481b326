import argparse
import io
import json

import httpx
import pytest

from dynaform.client import console
from dynaform.client.renderers import build_widget
from dynaform.client.schemas import FieldDefinition


def _scripted(answers):
    replies = iter(answers)
    return lambda prompt: next(replies)


def _args(tmp_path, **overrides):
    values = {"base_url": "http://test/api", "draft_path": str(tmp_path / "drafts.json"), "clear_draft": False}
    values.update(overrides)
    return argparse.Namespace(**values)


@pytest.fixture
def patch_transport(monkeypatch):
    """Route FormApiClient instances created by the console through a handler."""

    def _install(handler):
        original = console.FormApiClient

        def factory(base_url=None):
            return original(base_url=base_url, transport=httpx.MockTransport(handler))

        monkeypatch.setattr(console, "FormApiClient", factory)

    return _install


def test_parse_choice_for_options():
    widget = build_widget(FieldDefinition(name="Gender", field_type="LIST", options=["Male", "Female"]), "Male")
    assert console.parse_choice(widget, "2") == "Female"
    assert console.parse_choice(widget, "female") == "Female"
    assert console.parse_choice(widget, "") == "Male"
    assert console.parse_choice(widget, "9") == ""


def test_describe_lists_numbered_options():
    widget = build_widget(
        FieldDefinition(name="Love React?", field_type="RADIO", required=True, options=["Yes", "No"]), "No"
    )
    assert console.describe(widget) == "Love React? *\n    1. Yes\n  * 2. No"


@pytest.mark.anyio
async def test_run_submits_form(tmp_path, sample_config, patch_transport):
    submitted = []

    def handler(request):
        if request.method == "GET":
            return httpx.Response(200, json={"data": sample_config})
        submitted.append(json.loads(request.content))
        return httpx.Response(201, json={"id": 1})

    patch_transport(handler)
    out = io.StringIO()
    code = await console.run(_args(tmp_path), prompt=_scripted(["Jo", "jo@x.com", "", "2"]), out=out)

    assert code == 0
    assert submitted == [{"fullName": "Jo", "email": "jo@x.com", "gender": "Female", "loveReactFlag": False}]
    assert "Form submitted successfully!" in out.getvalue()


@pytest.mark.anyio
async def test_run_reports_unreachable_backend(tmp_path, patch_transport):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    patch_transport(handler)
    out = io.StringIO()
    code = await console.run(_args(tmp_path), prompt=_scripted([]), out=out)

    assert code == 1
    assert out.getvalue().strip() == console.CONFIG_UNAVAILABLE


@pytest.mark.anyio
async def test_run_without_fields(tmp_path, patch_transport):
    patch_transport(lambda request: httpx.Response(200, json={"data": []}))
    out = io.StringIO()
    code = await console.run(_args(tmp_path), prompt=_scripted([]), out=out)

    assert code == 1
    assert out.getvalue().strip() == console.NO_FIELDS


@pytest.mark.anyio
async def test_run_reports_malformed_config(tmp_path, patch_transport):
    bad_field = {"id": 1, "name": "Gender", "fieldType": "LIST", "required": True, "options": None}
    patch_transport(lambda request: httpx.Response(200, json={"data": [bad_field]}))
    out = io.StringIO()
    code = await console.run(_args(tmp_path), prompt=_scripted([]), out=out)

    assert code == 1
    assert out.getvalue().strip() == console.CONFIG_UNAVAILABLE
