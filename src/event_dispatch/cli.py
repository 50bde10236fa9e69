#!/usr/bin/env python3
"""Command-line interface for event dispatch.

Commands:
  - event-dispatch layouts : List available data layouts
  - event-dispatch map     : Lay out events from a JSON-lines file (no network)
  - event-dispatch send    : Deliver events from a JSON-lines file to Bulker

Typical usage:
  event-dispatch map --layout segment --input events.jsonl
  event-dispatch send --input events.jsonl
  event-dispatch send --input events.jsonl --config destinations.yaml --destination warehouse
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_RETRYABLE = 2


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="event-dispatch", description="Event layout & dispatch CLI")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("--json-logs", action="store_true", help="Emit JSON logs")
    p.add_argument("--log-level", default=None, help="Override log level (e.g. DEBUG)")
    sub = p.add_subparsers(dest="cmd")

    # layouts
    sub.add_parser("layouts", help="List available data layouts")

    # map
    pm = sub.add_parser("map", help="Lay out events without sending them")
    pm.add_argument("--input", "-i", required=True, help="Path to JSON-lines events ('-' for stdin)")
    pm.add_argument("--layout", "-l", default=None, help="Data layout (default from settings)")

    # send
    ps = sub.add_parser("send", help="Deliver events to Bulker")
    ps.add_argument("--input", "-i", required=True, help="Path to JSON-lines events ('-' for stdin)")
    ps.add_argument("--config", "-c", default=None, help="Path to destinations YAML")
    ps.add_argument("--destination", "-d", default=None, help="Destination id in the YAML config")
    ps.add_argument("--workspace-id", default="cli", help="Workspace id for metrics metadata")
    ps.add_argument("--source-id", default="cli", help="Source (stream) id for metrics metadata")
    ps.add_argument("--connection-id", default="cli", help="Connection id for metrics metadata")

    return p.parse_args(argv)


def _read_events(path: str) -> Iterator[dict[str, Any]]:
    if path == "-":
        lines = sys.stdin
    else:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Input not found: {p}")
        lines = p.read_text(encoding="utf-8").splitlines()

    for line in lines:
        line = line.strip()
        if line:
            yield json.loads(line)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI with the given arguments."""
    from event_dispatch.errors import ConfigurationError, InvalidEventError

    try:
        return _main_impl(argv)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in input: {e}", file=sys.stderr)
        return EXIT_ERROR
    except InvalidEventError as e:
        print(f"Error: Invalid event in input: {e}", file=sys.stderr)
        return EXIT_ERROR
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_ERROR


def _main_impl(argv: list[str] | None) -> int:
    args = _parse_args(argv)

    if args.version:
        from event_dispatch import __version__

        print(__version__)
        return EXIT_OK

    from event_dispatch.configs.settings import get_settings
    from event_dispatch.monitoring.logging import LoggingOptions, setup_logging

    settings = get_settings()
    setup_logging(
        LoggingOptions(
            level=args.log_level or settings.LOG_LEVEL,
            json_logs=args.json_logs or settings.JSON_LOGS,
        )
    )

    if args.cmd == "layouts":
        from event_dispatch.layouts.factory import available_layouts

        for name in available_layouts():
            print(name)
        return EXIT_OK

    if args.cmd == "map":
        return _cmd_map(args, settings)

    if args.cmd == "send":
        return asyncio.run(_cmd_send(args, settings))

    print("No command given. Use --help.", file=sys.stderr)
    return EXIT_ERROR


def _cmd_map(args: argparse.Namespace, settings) -> int:
    from event_dispatch.destination.client_ids import repair_client_ids
    from event_dispatch.layouts.factory import get_layout
    from event_dispatch.schemas.event import AnalyticsEvent

    layout = get_layout(args.layout or settings.DATA_LAYOUT)
    for payload in _read_events(args.input):
        event = repair_client_ids(AnalyticsEvent.from_payload(payload))
        for mapped in layout.map_event(event):
            print(
                json.dumps(
                    {"table": mapped.table, "record": mapped.record},
                    ensure_ascii=False,
                    default=str,
                )
            )
    return EXIT_OK


async def _cmd_send(args: argparse.Namespace, settings) -> int:
    from event_dispatch.configs.config import DestinationRegistry
    from event_dispatch.destination.bulker import BulkerDestination, FunctionContext
    from event_dispatch.errors import ConfigurationError, RetryError

    config_path = args.config or settings.DESTINATIONS_CONFIG_PATH
    if config_path:
        if not args.destination:
            raise ConfigurationError("--destination is required with a destinations config")
        config = DestinationRegistry(config_path).get_destination_config(args.destination)
    else:
        config = settings.to_destination_config()

    ctx = FunctionContext(
        workspace_id=args.workspace_id,
        source_id=args.source_id,
        destination_id=config.destination_id,
        connection_id=args.connection_id,
    )

    sent = 0
    failed = 0
    async with BulkerDestination(config) as destination:
        for payload in _read_events(args.input):
            try:
                await destination.send(payload, ctx)
                sent += 1
            except RetryError as e:
                failed += 1
                print(f"Retryable failure: {e}", file=sys.stderr)

    print(json.dumps({"sent": sent, "failed": failed}))
    return EXIT_RETRYABLE if failed else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
