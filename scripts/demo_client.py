#!/usr/bin/env python3
"""Drive the counter store against a running Hyperware node.

Configuration comes from ``HYPERAPP_*`` environment variables (see
:class:`pyhyperapp.HyperappConfig`), with flags taking precedence.

Default behavior:
1) initialize the store (resolve identity, load counters),
2) run each flow requested on the command line, in order,
3) print the resulting store state as JSON after every step.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyhyperapp import CounterStore, HyperappClient, HyperappConfig, SendMode, StoreState  # noqa: E402


def _state_dict(state: StoreState) -> dict[str, Any]:
    return state.model_dump(mode="json", exclude={"counters": {"raw"}})


def _print_state(step: str, state: StoreState) -> None:
    print(f"== {step}")
    print(json.dumps(_state_dict(state), indent=2, ensure_ascii=False, sort_keys=True))


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Exercise the counter app's request flows")
    parser.add_argument("--base-url", default=None, help="App URL including its mount prefix.")
    parser.add_argument("--node", default=None, help="Node identity to act as.")
    parser.add_argument("--ping", default=None, help="Send this message with send_ping().")
    parser.add_argument(
        "--ping-mismatch",
        action="store_true",
        help="Post a PingLocal body to the API path (uses --ping text or a fixed literal).",
    )
    parser.add_argument("--send", default=None, help="Send this message with send_message().")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in SendMode],
        default=SendMode.LOCAL.value,
        help="Delivery mode for --send.",
    )
    parser.add_argument("--target", default="", help="Remote node for --send in remote modes.")
    parser.add_argument(
        "--mismatch",
        nargs=2,
        metavar=("NODE", "MESSAGE"),
        default=None,
        help="Send MESSAGE to NODE with trigger_mismatch().",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging.")
    return parser.parse_args()


async def _run_flows(store: CounterStore, args: argparse.Namespace) -> None:
    if args.ping is not None:
        store.set_ping_message(args.ping)
        await store.send_ping()
        _print_state("send_ping", store.state)

    if args.ping_mismatch:
        await store.trigger_ping_mismatch()
        _print_state("trigger_ping_mismatch", store.state)

    if args.send is not None:
        store.set_send_mode(args.mode)
        store.set_remote_node(args.target)
        store.set_message(args.send)
        await store.send_message()
        _print_state("send_message", store.state)

    if args.mismatch is not None:
        node, message = args.mismatch
        store.set_mismatch_node(node)
        store.set_mismatch_message(message)
        await store.trigger_mismatch()
        _print_state("trigger_mismatch", store.state)


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.node:
        overrides["node_id"] = args.node
    config = HyperappConfig.from_env(**overrides)

    async with HyperappClient(config) as client:
        store = client.create_store()
        await store.initialize()
        _print_state("initialize", store.state)
        if not store.state.is_connected:
            return 2
        await _run_flows(store, args)

    return 1 if store.state.error else 0


def main() -> int:
    args = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
