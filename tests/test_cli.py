import json

import pytest
import requests
import typer
from typer.testing import CliRunner

from jsonable_request.cli import app, parse_data_pairs

runner = CliRunner()


@pytest.fixture()
def template_file(tmp_path):
    content = {
        "list_users": {
            "endpoint": "https://example.com/users",
            "method": "GET",
            "headers": {"X-Trace": "{{trace}}"},
            "data": {"id": "{{userId}}", "status": "active"},
        },
        "create_user": {
            "endpoint": "https://example.com/users",
            "data": {"name": "{{name}}", "admin": "{{admin}}"},
            "auth": {"type": "token", "token": "{{token}}"},
        },
    }
    path = tmp_path / "templates.json"
    path.write_text(json.dumps(content), encoding="utf-8")
    return path


def test_parse_data_pairs_coerces_scalars():
    assert parse_data_pairs(["a=1", "b=2.5", "c=true", "d=null", "e=text", "f=x=y"]) == {
        "a": 1,
        "b": 2.5,
        "c": True,
        "d": None,
        "e": "text",
        "f": "x=y",
    }


def test_parse_data_pairs_rejects_bare_keys():
    with pytest.raises(typer.BadParameter):
        parse_data_pairs(["novalue"])


def test_render_prints_resolved_template(template_file):
    result = runner.invoke(
        app,
        ["render", str(template_file), "--name", "create_user", "--data", "name=Ada", "--data", "admin=true"],
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["data"] == {"name": "Ada", "admin": True}
    assert payload["method"] == "POST"
    assert payload["body_format"] == "json"
    assert payload["auth"] == {"type": "token", "token": "{{token}}"}


def test_render_reads_data_file(template_file, tmp_path):
    data_file = tmp_path / "data.json"
    data_file.write_text(json.dumps({"userId": 5, "trace": "abc"}), encoding="utf-8")

    result = runner.invoke(
        app,
        ["render", str(template_file), "-n", "list_users", "--data-file", str(data_file), "-d", "trace=xyz"],
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["data"] == {"id": 5, "status": "active"}
    assert payload["headers"] == {"X-Trace": "xyz"}


def test_render_reports_unknown_template(template_file):
    result = runner.invoke(app, ["render", str(template_file), "--name", "nope"])

    assert result.exit_code == 1
    assert "Template 'nope' not found" in result.stderr


def test_render_reports_invalid_template(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text(json.dumps({"broken": {"method": "GET"}}), encoding="utf-8")

    result = runner.invoke(app, ["render", str(path)])

    assert result.exit_code == 1
    assert "must define an 'endpoint'" in result.stderr


def test_inspect_lists_placeholders_as_json(template_file):
    result = runner.invoke(app, ["inspect", str(template_file), "-n", "create_user", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["body_format"] == "json"
    assert payload["placeholders"] == [
        {"placeholder": "name", "section": "data"},
        {"placeholder": "admin", "section": "data"},
        {"placeholder": "token", "section": "auth"},
    ]


def test_inspect_renders_table(template_file):
    result = runner.invoke(app, ["inspect", str(template_file), "-n", "list_users"])

    assert result.exit_code == 0
    assert "userId" in result.stdout
    assert "trace" in result.stdout


def test_send_dispatches_request(template_file, requests_mock):
    matcher = requests_mock.get("https://example.com/users", json={"ok": True})

    result = runner.invoke(
        app,
        ["send", str(template_file), "-n", "list_users", "-d", "userId=5", "-d", "trace=t1", "--json"],
    )

    assert result.exit_code == 0
    assert matcher.last_request.url == "https://example.com/users?id=5&status=active"
    assert matcher.last_request.headers["X-Trace"] == "t1"
    payload = json.loads(result.stdout)
    assert payload["status_code"] == 200
    assert payload["body"] == {"ok": True}


def test_send_exits_non_zero_on_error_status(template_file, requests_mock):
    requests_mock.post("https://example.com/users", status_code=403, json={"error": "denied"})

    result = runner.invoke(
        app,
        ["send", str(template_file), "-n", "create_user", "-d", "token=abc"],
    )

    assert result.exit_code == 1
    assert "HTTP 403" in result.stdout
    assert "denied" in result.stdout
    assert requests_mock.last_request.headers["Authorization"] == "Bearer abc"


def test_send_reports_transport_failures(template_file, monkeypatch):
    def explode(self, *args, **kwargs):  # pragma: no cover - helper
        raise requests.exceptions.ConnectTimeout("timed out")

    monkeypatch.setattr(requests.Session, "request", explode)

    result = runner.invoke(app, ["send", str(template_file), "-n", "list_users"])

    assert result.exit_code == 1
    assert "Request failed: timed out" in result.stderr


def test_send_respects_env_timeout(template_file, monkeypatch):
    captured: dict[str, object] = {}

    class DummyBuilder:
        def __init__(self, **kwargs):
            captured.update(kwargs)

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

        def send(self, template, data=None):
            response = requests.Response()
            response.status_code = 204
            response._content = b""
            return response

    monkeypatch.setattr("jsonable_request.cli.RequestBuilder", DummyBuilder)

    result = runner.invoke(
        app,
        ["send", str(template_file), "-n", "list_users"],
        env={"JSONABLE_REQUEST_TIMEOUT": "5", "JSONABLE_REQUEST_VERIFY_SSL": "0"},
    )

    assert result.exit_code == 0
    assert captured["timeout"] == 5.0
    assert captured["verify_ssl"] is False
