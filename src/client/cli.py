"""Command-line client for the weather widget service."""

from __future__ import annotations

import argparse
import json

import httpx


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect or reconfigure the weather widget service")
    parser.add_argument("--server-url", default="http://localhost:7010", help="Widget service base URL")
    parser.add_argument("--timeout", type=float, default=30.0, help="Request timeout seconds")
    sub = parser.add_subparsers(dest="command", required=True)

    state = sub.add_parser("state", help="Show the current render state")
    state.add_argument("--settle", action="store_true", help="Wait for the in-flight fetch first")
    state.add_argument("--raw", action="store_true", help="Print the raw state JSON")

    configure = sub.add_parser("configure", help="Change widget options")
    configure.add_argument("--api-key", help="OpenWeatherMap API key")
    configure.add_argument("--city", help="City name, e.g. London")
    configure.add_argument("--units", choices=["metric", "imperial"])
    configure.add_argument("--theme", choices=["light", "dark"])
    return parser


def format_view(view: dict) -> str:
    lines = [view.get("title") or ""]
    if view.get("status") == "ready":
        lines.append(f"{view.get('temperature_label')}  {view.get('condition')} [{view.get('icon')}]")
        lines.append(f"Feels like {view.get('feels_like_label')}   Wind {view.get('wind_label')}")
        lines.append(f"Humidity {view.get('humidity_label')}   High / Low {view.get('high_low_label')}")
    elif view.get("message"):
        lines.append(view["message"])
    if view.get("help_text"):
        lines.append(view["help_text"])
    if view.get("help_link"):
        lines.append(view["help_link"])
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Avoid inheriting system proxy settings that can break localhost calls.
    try:
        with httpx.Client(timeout=args.timeout, trust_env=False) as client:
            if args.command == "state":
                resp = client.get(
                    f"{args.server_url}/widget/state",
                    params={"settle": "true"} if args.settle else None,
                )
            else:
                payload = {
                    "api_key": args.api_key,
                    "city": args.city,
                    "units": args.units,
                    "theme": args.theme,
                }
                resp = client.put(
                    f"{args.server_url}/widget/config",
                    json={k: v for k, v in payload.items() if v is not None},
                )
    except httpx.ReadTimeout:
        print("Request timed out. The widget may still be waiting on the weather API.")
        print("Try again without --settle, or with a longer timeout, e.g. --timeout 120")
        return 1
    except httpx.RequestError as exc:
        print(f"Could not reach widget service: {exc}")
        return 1
    if resp.status_code >= 400:
        print(f"Request failed: {resp.status_code}")
        print(resp.text)
        return 1

    data = resp.json()
    if args.command == "configure":
        print(json.dumps(data, ensure_ascii=False, indent=2))
    elif args.raw:
        print(json.dumps(data.get("state", {}), ensure_ascii=False, indent=2))
    else:
        print(format_view(data.get("view", {})))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
