# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""XBOW command-line interface."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ..config import API_VERSION, ClientSettings, load_client_settings
from ..errors import ConfigurationError, XbowError
from ..log import setup_logging
from ..models import (
    Assessment,
    Asset,
    CreateAssessmentRequest,
    CreateAssetRequest,
    CreateKeyRequest,
    CreateOrganizationRequest,
    CreateWebhookRequest,
    Finding,
    Organization,
    OrganizationAPIKey,
    UpdateAssetRequest,
    UpdateOrganizationRequest,
    UpdateWebhookRequest,
    Webhook,
)
from ..pagination import ListOptions
from ..runtime import XbowClient
from ..version import __version__
from .output import format_progress, format_time, print_details, print_json, print_list
from .parsing import parse_boundary_rules, parse_credentials, parse_headers, parse_members

logger = logging.getLogger(__name__)

Handler = Callable[[XbowClient, argparse.Namespace], None]


def _list_options(args: argparse.Namespace) -> ListOptions | None:
    limit = getattr(args, "limit", 0) or 0
    return ListOptions(limit=limit) if limit > 0 else None


def _write_bytes(data: bytes, output_file: str | None) -> None:
    if output_file:
        Path(output_file).write_bytes(data)
        print(f"Written to {output_file}", file=sys.stderr)
        return
    sys.stdout.buffer.write(data)
    sys.stdout.flush()


# ---------------------------------------------------------------------------
# detail renderers


def _show_assessment(args: argparse.Namespace, a: Assessment) -> None:
    if args.output == "json":
        print_json(a)
        return
    state = getattr(a.state, "value", a.state)
    print_details(
        [
            ("ID:", a.id),
            ("NAME:", a.name),
            ("ASSET ID:", a.asset_id),
            ("STATE:", state),
            ("PROGRESS:", format_progress(a.progress)),
            ("ATTACK CREDITS:", a.attack_credits),
            ("CREATED:", format_time(a.created_at)),
            ("UPDATED:", format_time(a.updated_at)),
        ]
    )


def _show_asset(args: argparse.Namespace, a: Asset) -> None:
    if args.output == "json":
        print_json(a)
        return
    rows: list[tuple[str, Any]] = [
        ("ID:", a.id),
        ("NAME:", a.name),
        ("ORGANIZATION ID:", a.organization_id),
        ("LIFECYCLE:", a.lifecycle),
        ("SKU:", a.sku),
    ]
    if a.start_url:
        rows.append(("START URL:", a.start_url))
    if a.max_requests_per_second:
        rows.append(("MAX RPS:", a.max_requests_per_second))
    for label, configured in (
        ("CREDENTIALS:", a.credentials),
        ("DNS RULES:", a.dns_boundary_rules),
        ("HTTP RULES:", a.http_boundary_rules),
        ("HEADERS:", a.headers),
    ):
        if configured:
            rows.append((label, f"{len(configured)} configured"))
    rows += [("CREATED:", format_time(a.created_at)), ("UPDATED:", format_time(a.updated_at))]
    print_details(rows)


def _show_finding(args: argparse.Namespace, f: Finding) -> None:
    if args.output == "json":
        print_json(f)
        return
    print_details(
        [
            ("ID:", f.id),
            ("NAME:", f.name),
            ("SEVERITY:", f.severity),
            ("STATE:", f.state),
            ("SUMMARY:", f.summary),
            ("IMPACT:", f.impact),
            ("MITIGATIONS:", f.mitigations),
            ("RECIPE:", f.recipe),
            ("EVIDENCE:", f.evidence),
            ("CREATED:", format_time(f.created_at)),
            ("UPDATED:", format_time(f.updated_at)),
        ]
    )


def _show_organization(args: argparse.Namespace, o: Organization) -> None:
    if args.output == "json":
        print_json(o)
        return
    rows: list[tuple[str, Any]] = [("ID:", o.id), ("NAME:", o.name)]
    if o.external_id:
        rows.append(("EXTERNAL ID:", o.external_id))
    rows += [
        ("STATE:", o.state.upper()),
        ("CREATED:", format_time(o.created_at)),
        ("UPDATED:", format_time(o.updated_at)),
    ]
    print_details(rows)


def _show_key(args: argparse.Namespace, k: OrganizationAPIKey) -> None:
    if args.output == "json":
        print_json(k)
        return
    rows: list[tuple[str, Any]] = [("ID:", k.id), ("NAME:", k.name), ("KEY:", k.key)]
    if k.expires_at is not None:
        rows.append(("EXPIRES AT:", format_time(k.expires_at)))
    rows.append(("CREATED:", format_time(k.created_at)))
    print_details(rows)


def _show_webhook(args: argparse.Namespace, wh: Webhook) -> None:
    if args.output == "json":
        print_json(wh)
        return
    print_details(
        [
            ("ID:", wh.id),
            ("TARGET URL:", wh.target_url),
            ("API VERSION:", wh.api_version),
            ("EVENTS:", ", ".join(wh.events)),
            ("CREATED:", format_time(wh.created_at)),
            ("UPDATED:", format_time(wh.updated_at)),
        ]
    )


# ---------------------------------------------------------------------------
# assessment


def _assessment_get(client: XbowClient, args: argparse.Namespace) -> None:
    _show_assessment(args, client.assessments.get(args.assessment_id))


def _assessment_create(client: XbowClient, args: argparse.Namespace) -> None:
    request = CreateAssessmentRequest(attack_credits=args.attack_credits, objective=args.objective or None)
    _show_assessment(args, client.assessments.create(args.asset_id, request))


def _assessment_list(client: XbowClient, args: argparse.Namespace) -> None:
    print_list(
        client.assessments.all_by_asset(args.asset_id, _list_options(args)),
        args.output,
        [("ID", 36), ("NAME", 24), ("STATE", 20), ("PROGRESS", 8), ("CREATED", 10)],
        lambda a: (
            a.id,
            a.name,
            getattr(a.state, "value", a.state),
            format_progress(a.progress),
            format_time(a.created_at, date_only=True),
        ),
    )


def _assessment_action(action: str) -> Handler:
    def handler(client: XbowClient, args: argparse.Namespace) -> None:
        _show_assessment(args, getattr(client.assessments, action)(args.assessment_id))

    return handler


# ---------------------------------------------------------------------------
# asset


def _asset_get(client: XbowClient, args: argparse.Namespace) -> None:
    _show_asset(args, client.assets.get(args.asset_id))


def _asset_create(client: XbowClient, args: argparse.Namespace) -> None:
    _show_asset(args, client.assets.create(args.org_id, CreateAssetRequest(name=args.name, sku=args.sku)))


def _asset_list(client: XbowClient, args: argparse.Namespace) -> None:
    print_list(
        client.assets.all_by_organization(args.org_id, _list_options(args)),
        args.output,
        [("ID", 36), ("NAME", 24), ("LIFECYCLE", 10), ("CREATED", 10)],
        lambda a: (a.id, a.name, a.lifecycle, format_time(a.created_at, date_only=True)),
    )


def _load_update_request(path: str) -> UpdateAssetRequest:
    try:
        raw = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"reading file: {exc}") from exc
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ConfigurationError(f"parsing JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError("parsing JSON: expected an object")
    return UpdateAssetRequest.from_mapping(data)


def _asset_update(client: XbowClient, args: argparse.Namespace) -> None:
    if args.from_file:
        request = _load_update_request(args.from_file)
    else:
        # Start from the current asset so flags only change what they name.
        request = UpdateAssetRequest.from_asset(client.assets.get(args.asset_id))
        if args.name is not None:
            request.name = args.name
        if args.start_url is not None:
            request.start_url = args.start_url
        if args.max_rps is not None:
            request.max_requests_per_second = args.max_rps
        if args.sku is not None:
            request.sku = args.sku
        if args.header is not None:
            request.headers = parse_headers(args.header)
        if args.credential is not None:
            request.credentials = parse_credentials(args.credential)
        if args.dns_rule is not None:
            request.dns_boundary_rules = parse_boundary_rules("dns-rule", args.dns_rule)
        if args.http_rule is not None:
            request.http_boundary_rules = parse_boundary_rules("http-rule", args.http_rule)
    _show_asset(args, client.assets.update(args.asset_id, request))


# ---------------------------------------------------------------------------
# finding


def _finding_get(client: XbowClient, args: argparse.Namespace) -> None:
    _show_finding(args, client.findings.get(args.finding_id))


def _finding_list(client: XbowClient, args: argparse.Namespace) -> None:
    print_list(
        client.findings.all_by_asset(args.asset_id, _list_options(args)),
        args.output,
        [("ID", 36), ("NAME", 32), ("SEVERITY", 8), ("STATE", 10), ("CREATED", 10)],
        lambda f: (f.id, f.name, f.severity, f.state, format_time(f.created_at, date_only=True)),
    )


def _finding_verify_fix(client: XbowClient, args: argparse.Namespace) -> None:
    _show_assessment(args, client.findings.verify_fix(args.finding_id))


# ---------------------------------------------------------------------------
# meta


def _meta_openapi(client: XbowClient, args: argparse.Namespace) -> None:
    _write_bytes(client.meta.get_openapi_spec(), args.output_file)


def _meta_signing_keys(client: XbowClient, args: argparse.Namespace) -> None:
    keys = client.meta.get_webhook_signing_keys()
    if args.output == "json":
        print_json(keys)
        return
    print("PUBLIC KEY")
    for key in keys:
        print(key.public_key)


# ---------------------------------------------------------------------------
# organization


def _organization_get(client: XbowClient, args: argparse.Namespace) -> None:
    _show_organization(args, client.organizations.get(args.org_id))


def _organization_create(client: XbowClient, args: argparse.Namespace) -> None:
    request = CreateOrganizationRequest(
        name=args.name,
        external_id=args.external_id,
        members=parse_members(args.member or []),
    )
    _show_organization(args, client.organizations.create(args.integration_id, request))


def _organization_update(client: XbowClient, args: argparse.Namespace) -> None:
    # An empty --external-id clears the value.
    request = UpdateOrganizationRequest(name=args.name, external_id=args.external_id or None)
    _show_organization(args, client.organizations.update(args.org_id, request))


def _organization_list(client: XbowClient, args: argparse.Namespace) -> None:
    print_list(
        client.organizations.all_by_integration(args.integration_id, _list_options(args)),
        args.output,
        [("ID", 36), ("NAME", 24), ("STATE", 10), ("CREATED", 10)],
        lambda o: (o.id, o.name, o.state.upper(), format_time(o.created_at, date_only=True)),
    )


def _organization_create_key(client: XbowClient, args: argparse.Namespace) -> None:
    request = CreateKeyRequest(name=args.name, expires_in_days=args.expires_in_days)
    _show_key(args, client.organizations.create_key(args.org_id, request))


def _organization_revoke_key(client: XbowClient, args: argparse.Namespace) -> None:
    client.organizations.revoke_key(args.key_id)
    print("Key revoked successfully.")


# ---------------------------------------------------------------------------
# report


def _report_get(client: XbowClient, args: argparse.Namespace) -> None:
    _write_bytes(client.reports.get(args.report_id), args.output_file)


def _report_summary(client: XbowClient, args: argparse.Namespace) -> None:
    summary = client.reports.get_summary(args.report_id)
    if args.output == "json" and not args.output_file:
        print_json(summary)
        return
    _write_bytes(summary.markdown.encode("utf-8"), args.output_file)


def _report_list(client: XbowClient, args: argparse.Namespace) -> None:
    print_list(
        client.reports.all_by_asset(args.asset_id, _list_options(args)),
        args.output,
        [("ID", 36), ("VERSION", 7), ("CREATED", 10)],
        lambda r: (r.id, r.version, format_time(r.created_at, date_only=True)),
    )


# ---------------------------------------------------------------------------
# webhook


def _webhook_get(client: XbowClient, args: argparse.Namespace) -> None:
    _show_webhook(args, client.webhooks.get(args.webhook_id))


def _webhook_create(client: XbowClient, args: argparse.Namespace) -> None:
    request = CreateWebhookRequest(api_version=args.api_version, target_url=args.target_url, events=args.event or [])
    _show_webhook(args, client.webhooks.create(args.org_id, request))


def _webhook_update(client: XbowClient, args: argparse.Namespace) -> None:
    request = UpdateWebhookRequest(api_version=args.api_version, target_url=args.target_url, events=args.event)
    _show_webhook(args, client.webhooks.update(args.webhook_id, request))


def _webhook_delete(client: XbowClient, args: argparse.Namespace) -> None:
    client.webhooks.delete(args.webhook_id)
    print("Webhook deleted.")


def _webhook_ping(client: XbowClient, args: argparse.Namespace) -> None:
    client.webhooks.ping(args.webhook_id)
    print("Ping sent.")


def _webhook_list(client: XbowClient, args: argparse.Namespace) -> None:
    print_list(
        client.webhooks.all_by_organization(args.org_id, _list_options(args)),
        args.output,
        [("ID", 36), ("TARGET URL", 32), ("API VERSION", 11), ("EVENTS", 20), ("CREATED", 10)],
        lambda wh: (wh.id, wh.target_url, wh.api_version, ",".join(wh.events), format_time(wh.created_at, date_only=True)),
    )


def _webhook_deliveries(client: XbowClient, args: argparse.Namespace) -> None:
    print_list(
        client.webhooks.all_deliveries(args.webhook_id, _list_options(args)),
        args.output,
        [("SENT AT", 19), ("SUCCESS", 7), ("STATUS", 6)],
        lambda d: (format_time(d.sent_at), str(d.success).lower(), d.response.status),
    )


# ---------------------------------------------------------------------------
# parser


def _add_limit(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--limit", type=int, default=0, help="Maximum number of results per page")


def _group(subparsers: Any, name: str, help_text: str, aliases: list[str]) -> Any:
    parser = subparsers.add_parser(name, help=help_text, aliases=aliases)
    return parser.add_subparsers(dest="action", required=True, metavar="<command>")


def _command(group: Any, name: str, help_text: str, handler: Handler) -> argparse.ArgumentParser:
    parser = group.add_parser(name, help=help_text)
    parser.set_defaults(handler=handler)
    return parser


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="xbow", description="XBOW CLI - Interact with the XBOW API")
    parser.add_argument("--org-key", help="Organization API key (or set XBOW_ORG_KEY env var)")
    parser.add_argument("--integration-key", help="Integration API key (or set XBOW_INTEGRATION_KEY env var)")
    parser.add_argument("--base-url", help="API base URL (or set XBOW_BASE_URL env var)")
    parser.add_argument("-o", "--output", choices=("table", "json"), default="table", help="Output format")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True, metavar="<command>")

    version = commands.add_parser("version", help="Print the xbow CLI and API version")
    version.set_defaults(handler=None)

    # assessment
    group = _group(commands, "assessment", "Manage assessments", ["assessments"])
    _command(group, "get", "Get an assessment by ID", _assessment_get).add_argument("assessment_id")
    cmd = _command(group, "create", "Create a new assessment", _assessment_create)
    cmd.add_argument("--asset-id", required=True, help="Asset ID to create assessment for")
    cmd.add_argument("--attack-credits", type=int, required=True, help="Number of attack credits to use")
    cmd.add_argument("--objective", help="Assessment objective")
    cmd = _command(group, "list", "List assessments for an asset", _assessment_list)
    cmd.add_argument("--asset-id", required=True, help="Asset ID to list assessments for")
    _add_limit(cmd)
    for action, help_text in (
        ("cancel", "Cancel a running assessment"),
        ("pause", "Pause a running assessment"),
        ("resume", "Resume a paused assessment"),
    ):
        _command(group, action, help_text, _assessment_action(action)).add_argument("assessment_id")

    # asset
    group = _group(commands, "asset", "Manage assets", ["assets"])
    _command(group, "get", "Get an asset by ID", _asset_get).add_argument("asset_id")
    cmd = _command(group, "create", "Create a new asset", _asset_create)
    cmd.add_argument("--org-id", required=True, help="Organization ID")
    cmd.add_argument("--name", required=True, help="Asset name")
    cmd.add_argument("--sku", default="standard-sku", help="Asset SKU")
    cmd = _command(group, "list", "List assets for an organization", _asset_list)
    cmd.add_argument("--org-id", required=True, help="Organization ID")
    _add_limit(cmd)
    cmd = _command(group, "update", "Update an asset", _asset_update)
    cmd.add_argument("asset_id")
    cmd.add_argument("--name", help="Asset name")
    cmd.add_argument("--start-url", help="Start URL")
    cmd.add_argument("--max-rps", type=int, help="Max requests per second")
    cmd.add_argument("--sku", help="Asset SKU")
    cmd.add_argument("--header", action="append", help='Header in "Key: Value" format (repeatable)')
    cmd.add_argument(
        "--credential", action="append", help='Credential as "name=n,type=basic,username=u,password=p" (repeatable)'
    )
    cmd.add_argument(
        "--dns-rule", action="append", help='DNS boundary rule as "action=allow-attack,type=hostname,filter=example.com"'
    )
    cmd.add_argument("--http-rule", action="append", help='HTTP boundary rule as "action=deny,type=url,filter=https://example.com"')
    cmd.add_argument("--from-file", help="Load full update request from JSON file (- for stdin)")

    # finding
    group = _group(commands, "finding", "Manage findings", ["findings"])
    _command(group, "get", "Get a finding by ID", _finding_get).add_argument("finding_id")
    cmd = _command(group, "list", "List findings for an asset", _finding_list)
    cmd.add_argument("--asset-id", required=True, help="Asset ID to list findings for")
    _add_limit(cmd)
    _command(group, "verify-fix", "Verify that a finding has been fixed", _finding_verify_fix).add_argument("finding_id")

    # meta
    group = _group(commands, "meta", "API metadata and utilities", [])
    cmd = _command(group, "openapi", "Get the OpenAPI specification", _meta_openapi)
    cmd.add_argument("-f", "--output-file", help="Write output to file")
    _command(group, "signing-keys", "Get webhook signing keys", _meta_signing_keys)

    # organization
    group = _group(commands, "organization", "Manage organizations", ["org", "organizations"])
    _command(group, "get", "Get an organization by ID", _organization_get).add_argument("org_id")
    cmd = _command(group, "create", "Create a new organization", _organization_create)
    cmd.add_argument("--integration-id", required=True, help="Integration ID")
    cmd.add_argument("--name", required=True, help="Organization name")
    cmd.add_argument("--external-id", help="External ID")
    cmd.add_argument(
        "--member", action="append", help='Member as "email=alice@example.com,name=Alice" (repeatable, at least one)'
    )
    cmd = _command(group, "update", "Update an organization", _organization_update)
    cmd.add_argument("org_id")
    cmd.add_argument("--name", required=True, help="Organization name")
    cmd.add_argument("--external-id", help="External ID (use empty string to clear)")
    cmd = _command(group, "list", "List organizations for an integration", _organization_list)
    cmd.add_argument("--integration-id", required=True, help="Integration ID")
    _add_limit(cmd)
    cmd = _command(group, "create-key", "Create an API key for an organization", _organization_create_key)
    cmd.add_argument("org_id")
    cmd.add_argument("--name", required=True, help="Key name")
    cmd.add_argument("--expires-in-days", type=int, help="Number of days until key expires")
    _command(group, "revoke-key", "Revoke an organization API key", _organization_revoke_key).add_argument("key_id")

    # report
    group = _group(commands, "report", "Manage reports", ["reports"])
    cmd = _command(group, "get", "Download a report as PDF", _report_get)
    cmd.add_argument("report_id")
    cmd.add_argument("-f", "--output-file", help="Path to write the PDF file")
    cmd = _command(group, "summary", "Get the markdown summary of a report", _report_summary)
    cmd.add_argument("report_id")
    cmd.add_argument("-f", "--output-file", help="Path to write the markdown summary")
    cmd = _command(group, "list", "List reports for an asset", _report_list)
    cmd.add_argument("--asset-id", required=True, help="Asset ID to list reports for")
    _add_limit(cmd)

    # webhook
    group = _group(commands, "webhook", "Manage webhooks", ["webhooks"])
    _command(group, "get", "Get a webhook by ID", _webhook_get).add_argument("webhook_id")
    cmd = _command(group, "create", "Create a new webhook", _webhook_create)
    cmd.add_argument("--org-id", required=True, help="Organization ID")
    cmd.add_argument("--target-url", required=True, help="Webhook target URL")
    cmd.add_argument("--api-version", default=API_VERSION, help="Webhook API version")
    cmd.add_argument("--event", action="append", help='Event type to subscribe to (repeatable, e.g. "assessment.changed")')
    cmd = _command(group, "update", "Update a webhook", _webhook_update)
    cmd.add_argument("webhook_id")
    cmd.add_argument("--target-url", help="Webhook target URL")
    cmd.add_argument("--api-version", help="Webhook API version")
    cmd.add_argument("--event", action="append", help="Event type to subscribe to (repeatable)")
    _command(group, "delete", "Delete a webhook", _webhook_delete).add_argument("webhook_id")
    _command(group, "ping", "Send a ping event to a webhook", _webhook_ping).add_argument("webhook_id")
    cmd = _command(group, "list", "List webhooks for an organization", _webhook_list)
    cmd.add_argument("--org-id", required=True, help="Organization ID")
    _add_limit(cmd)
    cmd = _command(group, "deliveries", "List delivery attempts for a webhook", _webhook_deliveries)
    cmd.add_argument("webhook_id")
    _add_limit(cmd)

    return parser


def _build_client(args: argparse.Namespace, settings: ClientSettings) -> XbowClient:
    org_key = args.org_key or settings.org_key
    integration_key = args.integration_key or settings.integration_key
    if not org_key and not integration_key:
        raise ConfigurationError(
            "API key required: use --org-key/--integration-key or set XBOW_ORG_KEY/XBOW_INTEGRATION_KEY"
        )
    return XbowClient(org_key, integration_key, base_url=args.base_url, settings=settings)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging("DEBUG" if args.verbose else None)

    if args.command == "version":
        print(f"xbow version {__version__}")
        print(f"api version {API_VERSION}")
        return 0

    settings = load_client_settings()
    try:
        with _build_client(args, settings) as client:
            args.handler(client, args)
    except XbowError as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
