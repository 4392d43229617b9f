#!/usr/bin/env python3
"""Send a task to the orchestrator from the command line. Prints each step result, cost, and the summary."""
import argparse
import json
import os
import sys
from typing import Any

import httpx

ORCHESTRATOR_URL = os.environ.get("ORCHESTRATOR_BASE_URL", "http://127.0.0.1:8000")


def _trunc(s: str, max_len: int = 100) -> str:
    s = str(s)
    return (s[:max_len] + "…") if len(s) > max_len else s


def _trace_request(method: str, url: str, body: dict | None, trace: bool) -> None:
    if not trace:
        return
    print(f"[REQUEST] {method} {url}", flush=True)
    if body is not None:
        print("[REQUEST BODY]", flush=True)
        print(json.dumps(body, indent=2), flush=True)
    print(flush=True)


def _trace_response(status: int, body: Any, trace: bool, max_body_len: int = 2000) -> None:
    if not trace:
        return
    print(f"[RESPONSE] {status}", flush=True)
    if body is not None:
        raw = json.dumps(body, indent=2) if isinstance(body, (dict, list)) else str(body)
        if len(raw) > max_body_len:
            raw = raw[:max_body_len] + "\n… (truncated)"
        print(raw, flush=True)
    print("---", flush=True)


def _print_result(data: dict) -> None:
    results = data.get("results") or []
    for i, r in enumerate(results, 1):
        meta = r.get("metadata") or {}
        label = "summary" if i == len(results) else f"step {i}"
        cost = meta.get("cost", 0.0)
        print(f"  [{label}] ← {meta.get('model', '?')}: {_trunc(r.get('result', ''), 150)} (cost {cost:.6f})", flush=True)
    print("---", flush=True)
    print(f"Total cost: {data.get('total_cost', 0.0):.6f}", flush=True)
    print(f"Total time: {data.get('total_time_ms', 0) / 1000:.1f}s", flush=True)
    if data.get("summary"):
        print("Summary:", flush=True)
        print(data["summary"], flush=True)


def main():
    parser = argparse.ArgumentParser(description="Send a task to the orchestrator and print step results and the summary.")
    parser.add_argument("description", nargs="*", help="Task description")
    parser.add_argument("--type", default="code", help="Task type (code, research, document, ...)")
    parser.add_argument("--priority", default="medium", choices=["low", "medium", "high", "urgent"])
    parser.add_argument("--context", default=None, help="Optional extra context")
    parser.add_argument("--ask", action="store_true", help="Ask the director directly instead of running a task")
    parser.add_argument("--url", default=ORCHESTRATOR_URL, help="Orchestrator base URL")
    parser.add_argument("--timeout", type=float, default=600, help="Request timeout in seconds")
    parser.add_argument("--trace", action="store_true", help="Print each URL, request body, and response")
    args = parser.parse_args()
    description = " ".join(args.description).strip()
    if not description:
        print('Usage: python scripts/query_cli.py "Create a hello world script"', file=sys.stderr)
        sys.exit(1)

    base = args.url.rstrip("/")
    if args.ask:
        url = f"{base}/ask"
        body = {"question": description, "context": args.context}
    else:
        url = f"{base}/tasks"
        body = {"type": args.type, "description": description, "priority": args.priority, "context": args.context}

    print("Task:" if not args.ask else "Question:", description, flush=True)
    print("---", flush=True)
    try:
        _trace_request("POST", url, body, args.trace)
        r = httpx.post(url, json=body, timeout=args.timeout)
        try:
            resp_body = r.json()
        except ValueError:
            resp_body = r.text
        _trace_response(r.status_code, resp_body, args.trace)
        if r.status_code != 200:
            detail = resp_body.get("detail") if isinstance(resp_body, dict) else resp_body
            print(f"Error ({r.status_code}): {detail}", file=sys.stderr)
            sys.exit(1)
        if args.ask:
            print(resp_body.get("result", ""), flush=True)
        else:
            _print_result(resp_body)
    except httpx.ConnectError:
        print(f"Cannot reach orchestrator at {args.url}. Is it running?", file=sys.stderr)
        sys.exit(1)
    except httpx.HTTPError as e:
        print(e, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
