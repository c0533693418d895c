#!/usr/bin/env python3
"""
Token Factory Simulator Daemon
Serves the simulated chain over JSON-RPC.

Usage:
    python tokenfactoryd.py [options]

Options:
    --conf=<file>       Config file (key=value)
    --rpcbind=<addr>    RPC bind address (default: 127.0.0.1)
    --rpcport=<port>    RPC port (default: 7350)
    --rpcuser=<user>    RPC username
    --rpcpassword=<pw>  RPC password
    --debug             Debug logging
    --help              Show this help
"""

import sys
import os
import argparse
import logging

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import config
from rpc import RPCMethods, create_app
from simulate import SimulateApp

logger = logging.getLogger('tokenfactoryd')


class TokenFactoryDaemon:
    """Simulator daemon main class."""

    def __init__(self, args):
        """Initialize daemon."""
        self.args = args

        settings = config.read_config_file(args.conf)

        self.host = args.rpcbind or settings.get('rpcbind', config.RPC_HOST)
        self.port = args.rpcport or int(settings.get('rpcport', config.RPC_PORT))
        username = args.rpcuser or settings.get('rpcuser')
        password = args.rpcpassword or settings.get('rpcpassword')

        self.sim = SimulateApp()
        self.rpc_methods = RPCMethods(self.sim)
        self.app = create_app(
            self.rpc_methods.get_methods(),
            username=username,
            password=password,
        )

    def start(self):
        """Start serving. Blocks until interrupted."""
        logger.info(f"{config.CLIENT_NAME} v{config.CLIENT_VERSION} ({config.CHAIN_ID})")
        logger.info(f"RPC server on {self.host}:{self.port}")

        self.app.run(host=self.host, port=self.port, threaded=True)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Token Factory Simulator Daemon",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python tokenfactoryd.py
    python tokenfactoryd.py --rpcport=7350 --debug
    python tokenfactoryd.py --rpcuser=user --rpcpassword=pass
        """
    )

    parser.add_argument('--conf', type=str,
                       help='Config file')
    parser.add_argument('--rpcbind', type=str,
                       help='RPC bind address')
    parser.add_argument('--rpcport', type=int,
                       help='RPC port')
    parser.add_argument('--rpcuser', type=str,
                       help='RPC username')
    parser.add_argument('--rpcpassword', type=str,
                       help='RPC password')
    parser.add_argument('--debug', action='store_true',
                       help='Debug logging')

    return parser.parse_args(argv)


def main():
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else getattr(logging, config.LOG_LEVEL),
        format=config.LOG_FORMAT,
    )

    daemon = TokenFactoryDaemon(args)

    try:
        daemon.start()
    except OSError as e:
        logger.error(f"Cannot start RPC server: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
