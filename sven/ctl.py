"""Command-line access to the desk bridge HTTP gateway."""

from __future__ import annotations

import argparse
import json
import sys

from .client import GatewayClient, GatewayError
from .config import DEFAULT_TOPIC_BASE
from .models import CommandKind

DEFAULT_URL = "http://localhost:3001"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send commands to the sven desk bridge")
    parser.add_argument("--url", default=DEFAULT_URL, help=f"Gateway base URL (default {DEFAULT_URL})")
    parser.add_argument("--topic-base", default=DEFAULT_TOPIC_BASE)
    parser.add_argument("--timeout", type=float, default=5.0)
    sub = parser.add_subparsers(dest="action", required=True)
    sub.add_parser("state", help="Print the last known desk state")
    sub.add_parser("status", help="Print the desk connectivity status")
    command = sub.add_parser("command", help="Send a desk command")
    command.add_argument("kind", choices=[kind.value for kind in CommandKind])
    command.add_argument("value", type=int)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        with GatewayClient(args.url, topic_base=args.topic_base, timeout=args.timeout) as client:
            if args.action == "state":
                result: object = client.get_state().to_dict()
            elif args.action == "status":
                result = client.get_status()
            else:
                result = client.send_command(args.kind, args.value)
    except GatewayError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(result))
    return 0
