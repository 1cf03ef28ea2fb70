"""CLI for traffic watch (e.g. run a single check from cron)."""
import argparse
import asyncio
import json
import sys
from datetime import datetime, timedelta, timezone

from trafficwatch.config import settings
from trafficwatch.errors import ConfigurationError
from trafficwatch.logging_config import configure_logging
from trafficwatch.schemas.check import CheckResponse, CheckStatus
from trafficwatch.services.checker import run_check
from trafficwatch.services.window_evaluator import compute_window

FAILED = {CheckStatus.config_error, CheckStatus.query_failed, CheckStatus.alert_failed}


def cmd_check(args: argparse.Namespace) -> int:
    result = asyncio.run(run_check(settings))
    print(CheckResponse.from_result(result).model_dump_json())
    if args.strict and result.status in FAILED:
        return 1
    return 0


def cmd_window(args: argparse.Namespace) -> int:
    minutes = args.minutes if args.minutes is not None else settings.lookback_minutes
    try:
        window = compute_window(datetime.now(timezone.utc), timedelta(minutes=minutes))
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(json.dumps({"start": window.start_iso, "end": window.end_iso}))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("trafficwatch.main:app", host=args.host or settings.host, port=args.port or settings.port)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Cloudflare zero-traffic alerting")
    sub = parser.add_subparsers(dest="cmd", required=True)

    check = sub.add_parser("check", help="Run one traffic check")
    check.add_argument("--strict", action="store_true", help="Exit 1 when the check could not complete")
    check.set_defaults(func=cmd_check)

    window = sub.add_parser("window", help="Print the window a check would query now")
    window.add_argument("--minutes", type=int, default=None, help="Lookback in minutes")
    window.set_defaults(func=cmd_window)

    serve = sub.add_parser("serve", help="Run the HTTP API and scheduler loop")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    configure_logging(settings.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
