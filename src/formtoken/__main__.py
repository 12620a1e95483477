"""
Form Token: Operator CLI

Inspects and drives the token buckets of one session held in Redis.
"""
import sys
import argparse
from typing import List, Optional
from .registry import TokenRegistry, SESSION_KEY
from .session_store import RedisSessionStore
from ..core.logger import configure_logging

def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Form token bucket tool"
    )
    parser.add_argument(
        "--session-id",
        required=True,
        help="Session whose buckets to operate on"
    )
    parser.add_argument(
        "--redis-url",
        default="redis://localhost:6379/0",
        help="Redis holding the sessions"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level for structured logs"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    inspect = commands.add_parser("inspect", help="List live tokens per context")
    inspect.add_argument("--context", help="Only this context")

    issue = commands.add_parser("issue", help="Generate a token")
    issue.add_argument("--context", required=True)
    issue.add_argument("--limit", type=positive_int, help="Max live tokens in the bucket")
    issue.add_argument("--max-usage", type=positive_int)

    validate = commands.add_parser("validate", help="Validate (consume) a token")
    validate.add_argument("--context", required=True)
    validate.add_argument("--token", required=True)
    validate.add_argument("--max-usage", type=positive_int)
    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    store = RedisSessionStore(args.session_id, redis_url=args.redis_url)

    if args.command == "inspect":
        buckets = store.get(SESSION_KEY) or {}
        names = [args.context] if args.context else list(buckets)
        for name in names:
            bucket = buckets.get(name, {})
            print(f"{name}: {len(bucket)} live token(s)")
            for token, usage in bucket.items():
                print(f"  {token} used {usage}x")
        return 0

    if args.command == "issue":
        registry = TokenRegistry(store, args.context, token_limit=args.limit, max_usage=args.max_usage)
        field = registry.render_reference(force=True)
        print(f"{field.name}={field.value}")
        return 0

    registry = TokenRegistry(store, args.context, max_usage=args.max_usage)
    if registry.validate(args.token):
        print("VALID")
        return 0
    print("INVALID")
    return 1

if __name__ == "__main__":
    sys.exit(main())
