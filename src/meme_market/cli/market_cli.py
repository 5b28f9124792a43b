"""CLI for the meme market API.

Usage:
  meme-market-cli health
  meme-market-cli market list
  meme-market-cli market get SKIBI
  meme-market-cli market advance
  meme-market-cli trends get SKIBI
  meme-market-cli trends cache
  meme-market-cli trends clear
  meme-market-cli leaderboard --limit 5 --holdings
  meme-market-cli transactions --limit 20
  meme-market-cli events active
  meme-market-cli events trigger meme_crash --duration-ms 60000
  meme-market-cli events cancel meme_crash
"""
import argparse
import json
import sys

import httpx


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_market_list(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/market")
    r.raise_for_status()
    data = r.json()
    print(f"{len(data)} instruments")
    print_json(data[: args.head] if args.head else data)
    return 0


def cmd_market_get(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get(f"/market/{args.symbol}")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_market_advance(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.post("/market/advance")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_trends_get(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get(f"/trends/{args.symbol}")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_trends_cache(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/trends/cache")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_trends_clear(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.delete("/trends/cache")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_leaderboard(client: httpx.Client, args: argparse.Namespace) -> int:
    params = {"limit": args.limit, "includeHoldings": args.holdings}
    r = client.get("/leaderboard", params=params)
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_transactions(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/transactions", params={"limit": args.limit})
    r.raise_for_status()
    data = r.json()
    print(f"{len(data)} transactions")
    print_json(data)
    return 0


def cmd_events_active(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/events/active")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_events_trigger(client: httpx.Client, args: argparse.Namespace) -> int:
    body: dict = {"event_type": args.event_type}
    if args.duration_ms is not None:
        body["duration_ms"] = args.duration_ms
    r = client.post("/events/trigger", json=body)
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_events_cancel(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.delete(f"/events/{args.event_type}")
    r.raise_for_status()
    print_json(r.json())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Query and administer the meme market API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:8001",
        help="API base URL (default: http://localhost:8001)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=60.0,
        help="Request timeout in seconds (default: 60; a tick can be slow)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    subparsers.add_parser("health", help="GET / health check")

    market = subparsers.add_parser("market", help="Market routes (/market)")
    market_sub = market.add_subparsers(dest="market_cmd", required=True)
    p = market_sub.add_parser("list", help="GET /market")
    p.add_argument("--head", type=int, default=0, help="Show only first N (0 = all)")
    p = market_sub.add_parser("get", help="GET /market/{symbol}")
    p.add_argument("symbol", help="Instrument symbol (e.g. SKIBI)")
    market_sub.add_parser("advance", help="POST /market/advance")

    trends = subparsers.add_parser("trends", help="Trend routes (/trends)")
    trends_sub = trends.add_subparsers(dest="trends_cmd", required=True)
    p = trends_sub.add_parser("get", help="GET /trends/{symbol}")
    p.add_argument("symbol", help="Instrument symbol")
    trends_sub.add_parser("cache", help="GET /trends/cache")
    trends_sub.add_parser("clear", help="DELETE /trends/cache")

    p = subparsers.add_parser("leaderboard", help="GET /leaderboard")
    p.add_argument("--limit", type=int, default=10, help="Max entries (default: 10, max 50)")
    p.add_argument("--holdings", action="store_true", help="Include holdings per user")

    p = subparsers.add_parser("transactions", help="GET /transactions")
    p.add_argument("--limit", type=int, default=50, help="Max rows (default: 50)")

    events = subparsers.add_parser("events", help="Market events (/events)")
    events_sub = events.add_subparsers(dest="events_cmd", required=True)
    events_sub.add_parser("active", help="GET /events/active")
    p = events_sub.add_parser("trigger", help="POST /events/trigger")
    p.add_argument("event_type", help="Event type (e.g. meme_crash)")
    p.add_argument("--duration-ms", type=int, default=None, help="Duration, 30000-3600000")
    p = events_sub.add_parser("cancel", help="DELETE /events/{event_type}")
    p.add_argument("event_type", help="Active event type")
    return parser


HANDLERS = {
    "health": cmd_health,
    "market": {
        "list": cmd_market_list,
        "get": cmd_market_get,
        "advance": cmd_market_advance,
    },
    "trends": {
        "get": cmd_trends_get,
        "cache": cmd_trends_cache,
        "clear": cmd_trends_clear,
    },
    "leaderboard": cmd_leaderboard,
    "transactions": cmd_transactions,
    "events": {
        "active": cmd_events_active,
        "trigger": cmd_events_trigger,
        "cancel": cmd_events_cancel,
    },
}


def main(argv: list[str] | None = None, transport: httpx.BaseTransport | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    base_url = args.base_url.rstrip("/")

    handler = HANDLERS[args.command]
    if isinstance(handler, dict):
        handler = handler[getattr(args, f"{args.command}_cmd")]

    try:
        with httpx.Client(base_url=base_url, timeout=args.timeout, transport=transport) as client:
            return handler(client, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json(), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
