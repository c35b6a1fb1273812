# MIT License
# Copyright (c) 2025 Hashborn

import argparse
import sys
import json
import logging
from .keystore import KeyStore
from ..config import Settings, load_settings
from ..core.service import run, run_once, load_signer
from ..observability import start_metrics_server
from ..protocol.config.params import DEFAULT_INTERVAL_SEC
from ..protocol.types.common import CheckpointError, ConfigurationError, RpcError
from ..rpc.client import ChainClient
from ..snapshot.manifest import ManifestReader

logger = logging.getLogger(__name__)

def setup_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s [%(levelname)s] %(message)s'
    )

def get_settings(args) -> Settings:
    try:
        return load_settings(args.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        sys.exit(2)

def get_keystore(args) -> KeyStore:
    return KeyStore(get_settings(args).keystore_dir)

# --- Checkpoint Commands ---
def cmd_run(args):
    settings = get_settings(args)
    if args.metrics_port:
        start_metrics_server(args.metrics_port)
        logger.info(f"Metrics exposed on :{args.metrics_port}/metrics")
    try:
        run(args.interval, chain_id=args.chain_id, settings=settings, run_immediately=args.now)
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        sys.exit(2)

def cmd_once(args):
    settings = get_settings(args)
    try:
        receipt = run_once(chain_id=args.chain_id, settings=settings)
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        sys.exit(2)
    except CheckpointError as e:
        print(f"Error: {type(e).__name__}: {e}")
        sys.exit(1)
    print(f"Success! TxHash: {receipt.tx_hash}")
    print(f"Block:      {receipt.block_number}")
    print(f"State hash: {receipt.state_hash}")

def cmd_manifest(args):
    settings = get_settings(args)
    try:
        settings.require_snapshot_location()
        reader = ManifestReader(settings.parity_dir, settings.chain_name)
        info = reader.read()
    except CheckpointError as e:
        print(f"Error: {e}")
        sys.exit(1)
    data = info.model_dump()
    data["path"] = str(reader.path)
    print(json.dumps(data, indent=2))

def cmd_status(args):
    settings = get_settings(args)
    try:
        settings.require_snapshot_location()
        info = ManifestReader(settings.parity_dir, settings.chain_name).read()
    except CheckpointError as e:
        print(f"Snapshot:   unavailable ({e})")
        info = None
    else:
        print(f"Snapshot:   block {info.block_number}, state root {info.state_hash}")

    try:
        head = ChainClient(settings.private_host, timeout=settings.rpc_timeout).block_number()
        lag = f" ({head - info.block_number} blocks behind)" if info else ""
        print(f"Source:     head {head}{lag}")
    except RpcError as e:
        print(f"Source:     unreachable ({e})")

    try:
        signer = load_signer(settings)
    except ConfigurationError as e:
        print(f"Signer:     {e}")
        return
    try:
        nonce = ChainClient(settings.public_host, timeout=settings.rpc_timeout).get_nonce(signer.get_address())
        print(f"Signer:     {signer.get_address()} (nonce {nonce})")
    except RpcError as e:
        print(f"Signer:     {signer.get_address()} (anchor unreachable: {e})")

# --- Keys Commands ---
def cmd_keys_add(args):
    ks = get_keystore(args)
    try:
        key = ks.create_key(args.name)
        print(f"Key '{args.name}' created.")
        print(f"Address: {key['address']}")
        print("Important: Private key saved unencrypted. Do not share!")
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

def cmd_keys_import(args):
    ks = get_keystore(args)
    try:
        key = ks.import_key(args.name, args.private_key)
        print(f"Key '{args.name}' imported.")
        print(f"Address: {key['address']}")
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

def cmd_keys_list(args):
    keys = get_keystore(args).list_keys()
    if not keys:
        print("No keys found.")
        return

    print(f"{'Name':<15} {'Address':<45}")
    print("-" * 60)
    for k in keys:
        print(f"{k['name']:<15} {k['address']:<45}")

def cmd_keys_show(args):
    key = get_keystore(args).get_key(args.name)
    if not key:
        print(f"Key '{args.name}' not found.")
        sys.exit(1)
    print(json.dumps({k: v for k, v in key.items() if k != 'private_key'}, indent=2))

def main(argv=None):
    parser = argparse.ArgumentParser(description="Checkpoint snapshot state roots to an anchor chain")
    parser.add_argument("--config", help="Path to config.json (default: ./config.json if present)")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    subparsers = parser.add_subparsers(dest="command")

    # Checkpointing
    p_run = subparsers.add_parser("run", help="Checkpoint periodically")
    p_run.add_argument("--interval", type=float, default=DEFAULT_INTERVAL_SEC, help="Seconds between checkpoints")
    p_run.add_argument("--chain-id", type=int, default=None, help="Source chain id recorded in the contract (default: 0)")
    p_run.add_argument("--metrics-port", type=int, default=None, help="Expose Prometheus metrics on this port")
    p_run.add_argument("--now", action="store_true", help="Run the first cycle immediately")

    p_once = subparsers.add_parser("once", help="Submit a single checkpoint and exit")
    p_once.add_argument("--chain-id", type=int, default=None, help="Source chain id recorded in the contract (default: 0)")

    subparsers.add_parser("manifest", help="Decode the current snapshot MANIFEST")
    subparsers.add_parser("status", help="Show snapshot, source head and signer nonce")

    # Keys
    p_keys = subparsers.add_parser("keys", help="Manage signer keys")
    sp_keys = p_keys.add_subparsers(dest="subcommand")

    pk_add = sp_keys.add_parser("add", help="Create new key")
    pk_add.add_argument("name", help="Key name")

    pk_imp = sp_keys.add_parser("import", help="Import private key")
    pk_imp.add_argument("name", help="Key name")
    pk_imp.add_argument("--private-key", required=True, help="Hex private key")

    sp_keys.add_parser("list", help="List keys")

    pk_show = sp_keys.add_parser("show", help="Show key details")
    pk_show.add_argument("name", help="Key name")

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "run": cmd_run(args)
    elif args.command == "once": cmd_once(args)
    elif args.command == "manifest": cmd_manifest(args)
    elif args.command == "status": cmd_status(args)
    elif args.command == "keys":
        if args.subcommand == "add": cmd_keys_add(args)
        elif args.subcommand == "import": cmd_keys_import(args)
        elif args.subcommand == "list": cmd_keys_list(args)
        elif args.subcommand == "show": cmd_keys_show(args)
        else: p_keys.print_help()
    else:
        parser.print_help()

if __name__ == "__main__":
    main()
