"""
Token Factory Simulator Configuration
Chain constants, RPC settings and logging defaults.
"""

from typing import Dict
import os

# ============================================================================
# CHAIN SPECIFICATIONS
# ============================================================================

CHAIN_ID = "simulate-1"
BECH32_PREFIX = "orai"

# Largest amount a single coin can carry (cosmwasm Uint128)
UINT128_MAX = 2 ** 128 - 1

# ============================================================================
# TOKEN FACTORY
# ============================================================================

# Denoms look like factory/<creator>/<subdenom>
DENOM_PREFIX = "factory"
DENOM_SEPARATOR = "/"

# Fee charged for create_denom (none in simulation)
DENOM_CREATION_FEE = []

# Top-level key of token factory custom messages and queries
CUSTOM_ROUTE = "token"

# ============================================================================
# RPC
# ============================================================================

RPC_HOST = "127.0.0.1"
RPC_PORT = 7350
RPC_TIMEOUT = 30

# ============================================================================
# LOGGING
# ============================================================================

LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# ============================================================================
# VERSION INFO
# ============================================================================

VERSION = "1.0.0"
VERSION_MAJOR = 1
VERSION_MINOR = 0
VERSION_PATCH = 0

CLIENT_NAME = "Token Factory Simulator"
CLIENT_VERSION = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def get_data_dir() -> str:
    """Get default data directory."""
    import platform

    if platform.system() == 'Windows':
        base = os.environ.get('APPDATA', os.path.expanduser('~'))
        dir_name = 'TokenFactorySim'
    elif platform.system() == 'Darwin':
        base = os.path.expanduser('~/Library/Application Support')
        dir_name = 'TokenFactorySim'
    else:
        base = os.path.expanduser('~')
        dir_name = '.tokenfactory'

    return os.path.join(base, dir_name)


def get_config_file() -> str:
    """Get config file path."""
    return os.path.join(get_data_dir(), 'tokenfactory.conf')


def read_config_file(config_file: str = None) -> Dict[str, str]:
    """
    Read a key=value config file.

    Blank lines and lines starting with '#' are ignored. A missing file
    yields an empty dict.

    Args:
        config_file: Path to config file (default location if None)

    Returns:
        Dictionary of settings
    """
    if config_file is None:
        config_file = get_config_file()

    settings = {}
    try:
        with open(config_file, 'r') as f:
            for line in f:
                line = line.strip()
                if '=' in line and not line.startswith('#'):
                    key, value = line.split('=', 1)
                    settings[key.strip()] = value.strip()
    except FileNotFoundError:
        pass

    return settings
