"""
Token Factory RPC Client
HTTP JSON-RPC client for the simulator daemon.
"""

from typing import Any, Dict, List

import requests

import config


class RPCClientError(Exception):
    """RPC client error."""
    pass


class RPCResponseError(Exception):
    """RPC response error."""

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class RPCClient:
    """
    Token factory RPC client.

    Methods can be called by name: client.getbalance(address, denom).
    """

    def __init__(
        self,
        host: str = config.RPC_HOST,
        port: int = config.RPC_PORT,
        username: str = None,
        password: str = None,
        timeout: int = config.RPC_TIMEOUT,
    ):
        """
        Initialize RPC client.

        Args:
            host: RPC server host
            port: RPC server port
            username: RPC username
            password: RPC password
            timeout: Request timeout in seconds
        """
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.timeout = timeout

        self._id = 0

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}/"

    @classmethod
    def from_config(cls, config_file: str = None) -> 'RPCClient':
        """
        Create client from config file.

        Args:
            config_file: Path to config file

        Returns:
            RPCClient instance
        """
        settings = config.read_config_file(config_file)

        return cls(
            host=settings.get('rpcconnect', config.RPC_HOST),
            port=int(settings.get('rpcport', config.RPC_PORT)),
            username=settings.get('rpcuser'),
            password=settings.get('rpcpassword'),
        )

    def call(self, method: str, *args) -> Any:
        """
        Call an RPC method.

        Args:
            method: Method name
            *args: Method arguments

        Returns:
            Method result
        """
        self._id += 1
        request = {
            'jsonrpc': '2.0',
            'method': method,
            'params': list(args),
            'id': self._id,
        }
        return self._check(self._post(request))

    def __getattr__(self, name: str):
        """Allow calling methods as attributes."""
        if name.startswith('_'):
            raise AttributeError(name)

        def method(*args):
            return self.call(name, *args)

        return method

    def batch(self, calls: List[Dict]) -> List[Any]:
        """
        Execute batch RPC request.

        Args:
            calls: List of {'method': ..., 'params': [...]}

        Returns:
            List of results, in call order
        """
        batch = []
        for i, call in enumerate(calls):
            batch.append({
                'jsonrpc': '2.0',
                'method': call['method'],
                'params': call.get('params', []),
                'id': i + 1,
            })

        responses = self._post(batch)
        if not isinstance(responses, list):
            return [self._check(responses)]

        responses = sorted(responses, key=lambda r: r.get('id') or 0)
        return [self._check(r) for r in responses]

    def _post(self, body: Any) -> Any:
        auth = None
        if self.username and self.password:
            auth = (self.username, self.password)

        try:
            resp = requests.post(self.url, json=body, auth=auth, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise RPCClientError("Request timed out")
        except requests.exceptions.ConnectionError:
            raise RPCClientError(
                f"Cannot connect to RPC server at {self.host}:{self.port}"
            )
        except requests.exceptions.RequestException as e:
            raise RPCClientError(f"Connection error: {e}")

        if resp.status_code == 401:
            raise RPCClientError("Authentication failed")

        if resp.status_code != 200:
            raise RPCClientError(f"HTTP error: {resp.status_code}")

        try:
            return resp.json()
        except ValueError as e:
            raise RPCClientError(f"Invalid JSON response: {e}")

    @staticmethod
    def _check(result: Dict) -> Any:
        if 'error' in result and result['error'] is not None:
            error = result['error']
            raise RPCResponseError(
                error.get('code', -1),
                error.get('message', 'Unknown error')
            )
        return result.get('result')
