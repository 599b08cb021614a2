#!/usr/bin/env python3
"""
Linkoftrust CLI - explore the link-of-trust contract from a terminal.

Commands:
  linkoftrust hash <account>        Print the identity of an account id
  linkoftrust user <who>            Fetch and print one user record
  linkoftrust explore <who>         Traverse the trust graph from a user
  linkoftrust users                 List registered identities
  linkoftrust state                 Dump and decode the contract storage

<who> is either an identity or an account id (hashed automatically).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from ..core.config import get_config
from ..core.exceptions import LinkOfTrustError
from ..graph.models import TrustGraph
from ..graph.sync import TrustGraphSync
from ..models import Identity
from ..network.identity import hash_account_id, is_identity, normalize_account_input
from ..network.rpc import NearRpcClient, create_rpc_client
from ..repository import UserRepository
from ..storage.preferences import JsonFileStore, PreferenceStore, PrefixedStore
from ..wire.state import decode_contract_state

PREFERENCES_PATH = Path.home() / ".linkoftrust" / "preferences.json"


def get_preferences(network_id: str) -> PreferenceStore:
    """Preferences for one network, persisted under the user's home."""
    return PreferenceStore(PrefixedStore(JsonFileStore(PREFERENCES_PATH), network_id))


async def resolve_identity(who: str, prefs: PreferenceStore | None = None) -> Identity:
    """Turn user input into an identity, remembering typed account ids."""
    if is_identity(who):
        return who
    account_id = normalize_account_input(who)
    identity = hash_account_id(account_id)
    if prefs is not None:
        await prefs.set_alias(identity, account_id)
    return identity


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, sort_keys=True))


async def format_graph(graph: TrustGraph, prefs: PreferenceStore) -> str:
    """Render a graph as an indented text listing."""
    lines = [f"{len(graph.nodes)} nodes, {len(graph.edges)} edges"]
    for node_id, node in graph.nodes.items():
        alias = await prefs.get_alias(node_id)
        flags = []
        if node.is_main_node:
            flags.append("main")
        if node.is_selected:
            flags.append("selected")
        if node.partial:
            flags.append("partial")
        label = f"{node_id} ({alias})" if alias else node_id
        suffix = f" [{', '.join(flags)}]" if flags else ""
        lines.append(f"  {label}{suffix}: {node.profile!r}")
        for child in node.children:
            lines.append(f"    -> {child}")
    return "\n".join(lines)


# ============================================================================
# Commands
# ============================================================================

def cmd_hash(args: argparse.Namespace) -> int:
    """Print the identity of an account id."""
    print(hash_account_id(normalize_account_input(args.account)))
    return 0


async def _cmd_user(args: argparse.Namespace, client: NearRpcClient) -> int:
    prefs = get_preferences(client.config.network_id)
    identity = await resolve_identity(args.who, prefs)
    record = await client.get_user_data(identity)
    if record is None:
        print(f"No user found for {identity}", file=sys.stderr)
        return 1
    print_json(record.to_dict())
    return 0


async def _cmd_explore(args: argparse.Namespace, client: NearRpcClient) -> int:
    prefs = get_preferences(client.config.network_id)
    identity = await resolve_identity(args.who, prefs)

    main_id = None
    if args.me:
        main_id = await resolve_identity(args.me, prefs)

    repository = UserRepository()
    sync = TrustGraphSync(
        fetch=client,
        on_node_fetched=repository,
        config=get_config().explore,
        main_id=main_id,
    )
    if main_id and main_id != identity:
        await sync.explore(main_id, depth=args.depth, select=False)
    graph = await sync.explore(identity, depth=args.depth)
    if graph is None or identity not in graph:
        print(f"No user found for {identity}", file=sys.stderr)
        return 1

    if args.json:
        print_json(graph.to_dict())
    else:
        print(await format_graph(graph, prefs))
    return 0


async def _cmd_users(args: argparse.Namespace, client: NearRpcClient) -> int:
    for identity in await client.view_users():
        print(identity)
    return 0


async def _cmd_state(args: argparse.Namespace, client: NearRpcClient) -> int:
    view_state = await client.fetch_view_state()
    state = decode_contract_state(view_state, get_config().layout)
    if args.json:
        print_json(state.to_dict())
        return 0

    print(f"Block {state.block_height} ({state.block_hash})")
    print(f"  entries:           {len(view_state.entries)}")
    print(f"  users:             {len(state.users)}")
    print(f"  private profiles:  {len(state.private_profiles)}")
    print(f"  trust relations:   {len(state.trust_network)}")
    print(f"  trust requests:    {len(state.trust_requests)}")
    print(f"  blocked requests:  {len(state.blocked_requests)}")
    print(f"  accepted deposits: {len(state.accepted_deposits)}")
    for identity, record in state.users.items():
        print(f"  {identity}: {record.profile!r} (cost {record.requested_trust_cost})")
    return 0


ASYNC_COMMANDS = {
    "user": _cmd_user,
    "explore": _cmd_explore,
    "users": _cmd_users,
    "state": _cmd_state,
}


def run_async_command(args: argparse.Namespace) -> int:
    """Run one of the commands that talk to the RPC endpoint."""
    client = create_rpc_client(
        network_id=args.network,
        contract_id=args.contract,
        rpc_url=args.rpc_url,
    )
    return asyncio.run(ASYNC_COMMANDS[args.command](args, client))


# ============================================================================
# Parser
# ============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="linkoftrust",
        description="Explore the link-of-trust contract",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--network",
        choices=["testnet", "mainnet"],
        help="Network (env: LINKOFTRUST_NETWORK)",
    )
    parser.add_argument(
        "--contract",
        metavar="ID",
        help="Contract account id (env: LINKOFTRUST_CONTRACT_ID)",
    )
    parser.add_argument(
        "--rpc-url",
        metavar="URL",
        help="RPC endpoint (env: LINKOFTRUST_RPC_URL)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    hash_parser = subparsers.add_parser("hash", help="Print the identity of an account id")
    hash_parser.add_argument("account", help="Account id (e.g. alice.testnet)")

    user_parser = subparsers.add_parser("user", help="Fetch one user record")
    user_parser.add_argument("who", help="Identity or account id")

    explore_parser = subparsers.add_parser("explore", help="Traverse the trust graph from a user")
    explore_parser.add_argument("who", help="Identity or account id")
    explore_parser.add_argument(
        "--depth",
        "-d",
        type=int,
        default=None,
        help="Exploration depth (env: LINKOFTRUST_DEPTH, default: 1)",
    )
    explore_parser.add_argument(
        "--me",
        metavar="WHO",
        help="Your own identity or account id; explored first and flagged as main",
    )
    explore_parser.add_argument("--json", action="store_true", help="Output as JSON")

    subparsers.add_parser("users", help="List registered identities")

    state_parser = subparsers.add_parser("state", help="Dump and decode the contract storage")
    state_parser.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    if not args.command:
        parser.print_help()
        return 0

    if getattr(args, "depth", None) is not None and args.depth < 0:
        parser.error("--depth must be >= 0")

    try:
        if args.command == "hash":
            return cmd_hash(args)
        return run_async_command(args)
    except (LinkOfTrustError, ValueError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1


# For CLI entry point
app = main


if __name__ == "__main__":
    sys.exit(main())
