# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import io
import json

import pytest

import xbow.cli.main as cli_main
from xbow import XbowClient
from xbow.cli.output import TableWriter, format_progress, print_details
from xbow.cli.parsing import parse_boundary_rules, parse_credentials, parse_headers, parse_kv, parse_members
from xbow.config import API_VERSION
from xbow.errors import InvalidRequestError
from xbow.http import HttpResponse, StubHttpClient
from xbow.version import __version__


def _json(data, status=200):
    return HttpResponse(status_code=status, content=json.dumps(data).encode())


@pytest.fixture
def stub(monkeypatch):
    for name in ("XBOW_ORG_KEY", "XBOW_INTEGRATION_KEY", "XBOW_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
    stub = StubHttpClient()

    def fake_client(org_key=None, integration_key=None, *, base_url=None, settings=None):
        return XbowClient(org_key, integration_key, base_url=base_url, http_client=stub, settings=settings)

    monkeypatch.setattr(cli_main, "XbowClient", fake_client)
    return stub


def test_version_needs_no_key(capsys, stub):
    assert cli_main.main(["version"]) == 0
    out = capsys.readouterr().out
    assert f"xbow version {__version__}" in out
    assert f"api version {API_VERSION}" in out
    assert stub.requests == []


def test_missing_key_is_an_error(capsys, stub):
    assert cli_main.main(["asset", "get", "a1"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("error: ")
    assert "API key required" in err
    assert stub.requests == []


def test_api_error_exit_code(capsys, stub):
    stub.add("GET", "/api/v1/assets/a1", _json({"code": "ERR_NOT_FOUND", "error": "Not Found", "message": "nope"}, 404))
    assert cli_main.main(["--org-key", "k", "asset", "get", "a1"]) == 1
    assert "nope" in capsys.readouterr().err
    assert stub.closed is True


def test_assessment_get_details(capsys, stub):
    stub.add(
        "GET",
        "/api/v1/assessments/as-1",
        _json({"id": "as-1", "name": "Weekly", "state": "running", "progress": 0.25, "createdAt": "2025-01-02T03:04:05Z"}),
    )
    assert cli_main.main(["--org-key", "k", "assessment", "get", "as-1"]) == 0
    out = capsys.readouterr().out
    assert "ID:" in out
    assert "as-1" in out
    assert "running" in out
    assert "25.0%" in out
    assert "2025-01-02 03:04:05" in out
    assert stub.requests[0].headers["Authorization"] == "Bearer k"


def test_list_json_walks_all_pages(capsys, stub):
    pages = {
        None: {"items": [{"id": "f1", "severity": "high"}], "nextCursor": "c1"},
        "c1": {"items": [{"id": "f2", "severity": "low"}], "nextCursor": None},
    }
    stub.add("GET", "/api/v1/assets/asset-1/findings", lambda req: _json(pages[(req.params or {}).get("after")]))
    assert cli_main.main(["--integration-key", "i", "-o", "json", "findings", "list", "--asset-id", "asset-1", "--limit", "1"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [item["id"] for item in data] == ["f1", "f2"]
    assert stub.requests[0].params == {"limit": 1}
    assert stub.requests[1].params == {"limit": 1, "after": "c1"}


def test_list_table_output(capsys, stub):
    stub.add(
        "GET",
        "/api/v1/organizations/org-1/assets",
        _json({"items": [{"id": "asset-1", "name": "Site", "lifecycle": "active", "createdAt": "2025-03-04T00:00:00Z"}]}),
    )
    assert cli_main.main(["--org-key", "k", "assets", "list", "--org-id", "org-1"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["ID", "NAME", "LIFECYCLE", "CREATED"]
    assert lines[1].split() == ["asset-1", "Site", "active", "2025-03-04"]


def test_list_reports_pagination_failure(capsys, stub):
    stub.add("GET", "/api/v1/assets/asset-1/reports", _json({"items": [{"id": "r1", "version": 1}], "nextCursor": "", "hasMore": True}))
    assert cli_main.main(["--org-key", "k", "report", "list", "--asset-id", "asset-1"]) == 1
    captured = capsys.readouterr()
    assert "r1" in captured.out
    assert "ERR_MISSING_CURSOR" in captured.err


def test_organization_create_requires_member_fields(capsys, stub):
    code = cli_main.main(
        ["--integration-key", "i", "org", "create", "--integration-id", "int-1", "--name", "Acme", "--member", "email=a@x.test"]
    )
    assert code == 1
    assert "member missing required field 'name'" in capsys.readouterr().err
    assert stub.requests == []


def test_revoke_key_and_webhook_messages(capsys, stub):
    stub.add("DELETE", "/api/v1/keys/k1", HttpResponse(status_code=204))
    stub.add("DELETE", "/api/v1/webhooks/wh-1", HttpResponse(status_code=204))
    stub.add("POST", "/api/v1/webhooks/wh-1/ping", HttpResponse(status_code=204))
    assert cli_main.main(["--integration-key", "i", "organization", "revoke-key", "k1"]) == 0
    assert cli_main.main(["--org-key", "k", "webhook", "delete", "wh-1"]) == 0
    assert cli_main.main(["--org-key", "k", "webhook", "ping", "wh-1"]) == 0
    out = capsys.readouterr().out
    assert "Key revoked successfully." in out
    assert "Webhook deleted." in out
    assert "Ping sent." in out


def test_asset_update_merges_flags_into_current_asset(capsys, stub):  # noqa: ARG001
    current = {"id": "a1", "name": "Site", "startUrl": "https://site.test", "maxRequestsPerSecond": 10, "sku": "standard-sku"}
    stub.add("GET", "/api/v1/assets/a1", _json(current))
    stub.add("PUT", "/api/v1/assets/a1", lambda req: _json({**current, **json.loads(req.body)}))
    code = cli_main.main(
        ["--org-key", "k", "asset", "update", "a1", "--max-rps", "3", "--header", "X-Env: staging", "--dns-rule", "action=deny,type=hostname,filter=x.test"]
    )
    assert code == 0
    payload = json.loads(stub.requests[1].body)
    assert payload["name"] == "Site"
    assert payload["startUrl"] == "https://site.test"
    assert payload["maxRequestsPerSecond"] == 3
    assert payload["headers"] == {"X-Env": ["staging"]}
    assert payload["dnsBoundaryRules"] == [{"action": "deny", "type": "hostname", "filter": "x.test"}]


def test_asset_update_from_file(tmp_path, stub):
    doc = tmp_path / "asset.json"
    doc.write_text(json.dumps({"name": "New", "startUrl": "https://new.test", "maxRequestsPerSecond": 2}), encoding="utf-8")
    stub.add("PUT", "/api/v1/assets/a1", _json({"id": "a1", "name": "New"}))
    assert cli_main.main(["--org-key", "k", "-o", "json", "asset", "update", "a1", "--from-file", str(doc)]) == 0
    assert len(stub.requests) == 1
    assert json.loads(stub.requests[0].body)["startUrl"] == "https://new.test"


def test_report_download_to_file(tmp_path, capsys, stub):
    stub.add("GET", "/api/v1/reports/r1", HttpResponse(status_code=200, content=b"%PDF-1.7"))
    target = tmp_path / "report.pdf"
    assert cli_main.main(["--org-key", "k", "report", "get", "r1", "-f", str(target)]) == 0
    assert target.read_bytes() == b"%PDF-1.7"
    assert "Written to" in capsys.readouterr().err


def test_signing_keys_json(capsys, stub):
    stub.add("GET", "/api/v1/meta/webhooks-signing-keys", _json([{"publicKey": "MCowBQYDK2VwAyEA"}]))
    assert cli_main.main(["--org-key", "k", "-o", "json", "meta", "signing-keys"]) == 0
    assert json.loads(capsys.readouterr().out) == [{"public_key": "MCowBQYDK2VwAyEA"}]


def test_parser_aliases():
    parser = cli_main.build_parser()
    args = parser.parse_args(["organizations", "list", "--integration-id", "i1"])
    assert args.handler is cli_main._organization_list
    assert parser.parse_args(["assessments", "pause", "as-1"]).assessment_id == "as-1"


def test_flag_parsers():
    assert parse_kv("a=1, b = 2,junk") == {"a": "1", "b": "2"}
    assert parse_headers(["X-A: 1", "X-A: 2", "X-B:3"]) == {"X-A": ["1", "2"], "X-B": ["3"]}
    assert parse_credentials(["name=n,type=basic,username=u,password=p,email-address=e@x.test"]) == [
        {"name": "n", "type": "basic", "username": "u", "password": "p", "emailAddress": "e@x.test"}
    ]
    assert parse_boundary_rules("http-rule", ["action=allow-attack,type=url,filter=https://x.test,include-subdomains=true"]) == [
        {"action": "allow-attack", "type": "url", "filter": "https://x.test", "includeSubdomains": True}
    ]
    assert parse_members(["email=a@x.test,name=A"])[0].email == "a@x.test"
    with pytest.raises(InvalidRequestError):
        parse_headers(["no separator"])
    with pytest.raises(InvalidRequestError):
        parse_credentials(["name=n,type=basic"])


def test_output_helpers():
    buf = io.StringIO()
    table = TableWriter([("ID", 4), ("LONGHEADER", 2)], stream=buf)
    table.row("a", None)
    assert buf.getvalue().splitlines() == ["ID    LONGHEADER", "a"]

    buf = io.StringIO()
    print_details([("ID:", "x"), ("LONG LABEL:", None)], stream=buf)
    assert buf.getvalue().splitlines() == ["ID:          x", "LONG LABEL:"]
    assert format_progress(0.5) == "50.0%"


def test_list_json_fails_cleanly_on_unreadable_page(capsys, stub):
    pages = {
        None: _json({"items": [{"id": "r1", "version": 1}], "nextCursor": "c1"}),
        "c1": HttpResponse(status_code=200, content=b"<html>gateway</html>"),
    }
    stub.add("GET", "/api/v1/assets/asset-1/reports", lambda req: pages[(req.params or {}).get("after")])
    assert cli_main.main(["--org-key", "k", "-o", "json", "report", "list", "--asset-id", "asset-1"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("error: ")
    assert "ERR_DECODE_RESPONSE" in captured.err


def test_malformed_response_prints_error_not_traceback(capsys, stub):
    stub.add("GET", "/api/v1/findings/f1", _json({"id": "f1", "updatedAt": "not-a-date"}))
    assert cli_main.main(["--org-key", "k", "finding", "get", "f1"]) == 1
    assert "ERR_DECODE_RESPONSE" in capsys.readouterr().err
