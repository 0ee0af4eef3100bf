"""CLI entry point for iaas-client.

Lists the operation catalog, invokes operations, and signs requests without
sending them (for debugging signatures against the API).

Exit codes: 0 on success, 1 on a client/transport/service error, 2 on
usage errors.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any
from urllib.parse import quote, urlencode

import yaml

from iaas_client.catalog import REGISTRY, actions
from iaas_client.client import IaaSService
from iaas_client.config_loader import DEFAULT_USER_CONFIG_PATH, config_from_env, default_config, load_config
from iaas_client.errors import IaaSError
from iaas_client.log import LEVELS, configure_logging
from iaas_client.models import Config


def parse_assignment(value: str) -> tuple[str, Any]:
    """Parse KEY=VALUE; VALUE is read as YAML so lists and numbers work.

    Raises:
        argparse.ArgumentTypeError: If value has no '=' or an empty key.
    """
    if "=" not in value:
        raise argparse.ArgumentTypeError(
            f"Invalid format '{value}'. Expected KEY=VALUE (e.g., 'caches=[rc-1234]')"
        )
    key, raw = value.split("=", 1)
    if not key:
        raise argparse.ArgumentTypeError(f"Invalid format '{value}'. Key cannot be empty.")
    if raw == "":
        return key, ""
    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError:
        parsed = raw
    return key, raw if parsed is None else parsed


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp.

    Raises:
        argparse.ArgumentTypeError: If value is not ISO 8601.
    """
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid timestamp '{value}'. Expected ISO 8601.")


@dataclass
class ListOperationsArgs:
    """Parsed arguments for list-operations mode."""


@dataclass
class CallArgs:
    """Parsed arguments for call mode."""

    action: str
    zone: str | None
    fields: dict[str, Any]
    config: Path | None
    log_level: str | None


@dataclass
class SignArgs:
    """Parsed arguments for sign mode."""

    action: str
    zone: str | None
    fields: dict[str, Any]
    config: Path | None
    log_level: str | None
    timestamp: datetime | None


def _add_request_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("action", help="API action name, e.g. DescribeCaches")
    parser.add_argument("--zone", help="Zone for zone-scoped actions (default: config zone)")
    parser.add_argument(
        "--set",
        dest="fields",
        type=parse_assignment,
        action="append",
        metavar="KEY=VALUE",
        help="Input field; may be repeated (e.g., --set limit=10 --set caches=[rc-1])",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to config YAML (default: {DEFAULT_USER_CONFIG_PATH} if present)",
    )
    parser.add_argument(
        "--log-level",
        choices=sorted(LEVELS),
        default=None,
        help="Override the config log level",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with list-operations, call and sign subcommands."""
    parser = argparse.ArgumentParser(
        prog="iaas-client",
        description="Call QingCloud IaaS API operations.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Mode")

    subparsers.add_parser("list-operations", help="List all catalogued operations")

    call_parser = subparsers.add_parser("call", help="Invoke an operation and print its output")
    _add_request_arguments(call_parser)

    sign_parser = subparsers.add_parser(
        "sign", help="Validate, marshal and sign an operation without sending it"
    )
    _add_request_arguments(sign_parser)
    sign_parser.add_argument(
        "--timestamp",
        type=parse_timestamp,
        default=None,
        help="Signing time as ISO 8601 (default: now)",
    )

    return parser


def _build_fields(assignments: list[tuple[str, Any]] | None) -> dict[str, Any]:
    """Merge --set pairs; a key given twice collects its values into a list."""
    fields: dict[str, Any] = {}
    for key, value in assignments or []:
        if key not in fields:
            fields[key] = value
        elif isinstance(fields[key], list):
            fields[key].append(value)
        else:
            fields[key] = [fields[key], value]
    return fields


def parse_args(args: list[str] | None = None) -> ListOperationsArgs | CallArgs | SignArgs:
    """Parse command-line arguments and return typed args dataclass.

    Raises:
        SystemExit: If arguments are invalid (argparse behavior).
    """
    parser = build_parser()
    namespace = parser.parse_args(args)

    if namespace.command == "list-operations":
        return ListOperationsArgs()

    fields = _build_fields(namespace.fields)
    if namespace.command == "call":
        return CallArgs(
            action=namespace.action,
            zone=namespace.zone,
            fields=fields,
            config=namespace.config,
            log_level=namespace.log_level,
        )
    return SignArgs(
        action=namespace.action,
        zone=namespace.zone,
        fields=fields,
        config=namespace.config,
        log_level=namespace.log_level,
        timestamp=namespace.timestamp,
    )


def resolve_config(path: Path | None) -> Config:
    """Config from --config, else the user file when present, else defaults; then QY_* env."""
    if path is not None:
        base = load_config(path)
    elif DEFAULT_USER_CONFIG_PATH.expanduser().exists():
        base = load_config(DEFAULT_USER_CONFIG_PATH)
    else:
        base = default_config()
    return config_from_env(base)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    try:
        parsed = parse_args(argv)

        if isinstance(parsed, ListOperationsArgs):
            return run_list_operations(parsed)
        elif isinstance(parsed, CallArgs):
            return run_call(parsed)
        else:
            return run_sign(parsed)

    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 1


def run_list_operations(args: ListOperationsArgs) -> int:
    """Print every catalogued action with its method and service."""
    for action in actions():
        entry = REGISTRY[action]
        scope = "zone" if entry.op_def.zone_scoped else "global"
        print(f"{action}")
        print(f"  {entry.op_def.method} {entry.service_type.name} ({scope})")
    print(f"Total: {len(REGISTRY)} operations")
    return 0


def _prepare(args: CallArgs | SignArgs) -> Config | None:
    if args.action not in REGISTRY:
        print(f"Error: unknown action '{args.action}'. See 'iaas-client list-operations'.", file=sys.stderr)
        return None
    config = resolve_config(args.config)
    configure_logging(args.log_level or config.log_level)
    return config


def run_call(args: CallArgs) -> int:
    """Invoke one action and print its output as JSON."""
    try:
        config = _prepare(args)
        if config is None:
            return 2
        with IaaSService(config) as iaas:
            output = iaas.call(args.action, zone=args.zone, **args.fields)
    except IaaSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(output.model_dump(mode="json", exclude_unset=True), indent=2, sort_keys=True))
    return 0


def run_sign(args: SignArgs) -> int:
    """Print the string to sign and the signed query for one action."""
    try:
        config = _prepare(args)
        if config is None:
            return 2
        with IaaSService(config) as iaas:
            signed = iaas.build_call(
                args.action, zone=args.zone, timestamp=args.timestamp, **args.fields
            )
    except IaaSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"{signed.method} {config.endpoint}{signed.path}")
    print()
    print("String to sign:")
    print(signed.string_to_sign)
    print()
    print("Signed query:")
    print(_format_query(signed.params))
    return 0


def _format_query(params: list[tuple[str, str]]) -> str:
    return urlencode(params, quote_via=quote)


if __name__ == "__main__":
    sys.exit(main())
