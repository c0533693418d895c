#!/usr/bin/env python3
"""
Token Factory CLI
Talk to a running simulator daemon.

Usage:
    tokenfactory-cli createdenom <sender> <subdenom> [--metadata JSON]
    tokenfactory-cli mint <sender> <denom> <amount> <to>
    tokenfactory-cli burn <sender> <denom> <amount> <from>
    tokenfactory-cli forcetransfer <sender> <denom> <amount> <from> <to>
    tokenfactory-cli balance <address> [denom]
    tokenfactory-cli denoms <creator>
    tokenfactory-cli metadata <denom>
    tokenfactory-cli admin <denom>
    tokenfactory-cli getinfo
"""

import sys
import os
import argparse
import json

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import config
from rpc.client import RPCClient, RPCClientError, RPCResponseError


def make_client(args) -> RPCClient:
    client = RPCClient.from_config(args.conf)
    if args.rpcconnect:
        client.host = args.rpcconnect
    if args.rpcport:
        client.port = args.rpcport
    if args.rpcuser:
        client.username = args.rpcuser
    if args.rpcpassword:
        client.password = args.rpcpassword
    return client


def cmd_createdenom(client, args):
    metadata = json.loads(args.metadata) if args.metadata else None
    return client.createdenom(args.sender, args.subdenom, metadata)


def cmd_mint(client, args):
    return client.minttokens(args.sender, args.denom, args.amount, args.to)


def cmd_burn(client, args):
    return client.burntokens(args.sender, args.denom, args.amount, args.source)


def cmd_forcetransfer(client, args):
    return client.forcetransfer(args.sender, args.denom, args.amount, args.source, args.to)


def cmd_balance(client, args):
    if args.denom:
        return {'denom': args.denom, 'amount': client.getbalance(args.address, args.denom)}
    return client.getallbalances(args.address)


def cmd_denoms(client, args):
    return client.listdenoms(args.creator)


def cmd_metadata(client, args):
    return client.getdenommetadata(args.denom)


def cmd_admin(client, args):
    return client.getdenomadmin(args.denom)


def cmd_getinfo(client, args):
    return client.getinfo()


COMMANDS = {
    'createdenom': cmd_createdenom,
    'mint': cmd_mint,
    'burn': cmd_burn,
    'forcetransfer': cmd_forcetransfer,
    'balance': cmd_balance,
    'denoms': cmd_denoms,
    'metadata': cmd_metadata,
    'admin': cmd_admin,
    'getinfo': cmd_getinfo,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=f'{config.CLIENT_NAME} CLI',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--conf', type=str, help='Config file')
    parser.add_argument('--rpcconnect', type=str, help='RPC host')
    parser.add_argument('--rpcport', type=int, help='RPC port')
    parser.add_argument('--rpcuser', type=str, help='RPC username')
    parser.add_argument('--rpcpassword', type=str, help='RPC password')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    p = subparsers.add_parser('createdenom', help='Create a denom')
    p.add_argument('sender')
    p.add_argument('subdenom')
    p.add_argument('--metadata', type=str, help='Metadata as JSON')

    p = subparsers.add_parser('mint', help='Mint tokens (admin only)')
    p.add_argument('sender')
    p.add_argument('denom')
    p.add_argument('amount')
    p.add_argument('to')

    p = subparsers.add_parser('burn', help='Burn tokens')
    p.add_argument('sender')
    p.add_argument('denom')
    p.add_argument('amount')
    p.add_argument('source', metavar='from')

    p = subparsers.add_parser('forcetransfer', help='Force a transfer')
    p.add_argument('sender')
    p.add_argument('denom')
    p.add_argument('amount')
    p.add_argument('source', metavar='from')
    p.add_argument('to')

    p = subparsers.add_parser('balance', help='Show balances')
    p.add_argument('address')
    p.add_argument('denom', nargs='?')

    p = subparsers.add_parser('denoms', help='List denoms of a creator')
    p.add_argument('creator')

    p = subparsers.add_parser('metadata', help='Show denom metadata')
    p.add_argument('denom')

    p = subparsers.add_parser('admin', help='Show denom admin')
    p.add_argument('denom')

    subparsers.add_parser('getinfo', help='Simulator info')

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    client = make_client(args)
    try:
        result = handler(client, args)
    except RPCResponseError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    except RPCClientError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"error: invalid metadata JSON: {e}", file=sys.stderr)
        return 1

    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
