"""
Token Factory RPC Server
Flask JSON-RPC 2.0 endpoint in front of the simulated chain.
"""

import logging
import traceback
from typing import Dict, Any, Optional, Callable

from flask import Flask, request, jsonify, Response

import config

logger = logging.getLogger(__name__)


class RPCError(Exception):
    """RPC error with code."""

    # Standard JSON-RPC error codes
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Application error codes
    RPC_MISC_ERROR = -1
    RPC_TYPE_ERROR = -3
    RPC_INVALID_PARAMETER = -8
    RPC_EXECUTION_ERROR = -25

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class RPCDispatcher:
    """
    JSON-RPC method registry and request handling.

    Kept separate from Flask so requests can be handled without HTTP.
    """

    def __init__(self, username: str = None, password: str = None):
        self.username = username
        self.password = password
        self.auth_required = username is not None and password is not None

        self._methods: Dict[str, Callable] = {}

    def register_method(self, name: str, handler: Callable):
        self._methods[name] = handler

    def register_methods(self, methods: Dict[str, Callable]):
        """
        Register multiple RPC methods.

        Args:
            methods: Dictionary of method name -> handler
        """
        self._methods.update(methods)

    def check_auth(self, username: str, password: str) -> bool:
        return username == self.username and password == self.password

    def execute_method(self, method: str, params) -> Any:
        """
        Execute an RPC method.

        Args:
            method: Method name
            params: Positional (list) or named (dict) parameters

        Returns:
            Method result
        """
        handler = self._methods.get(method)

        if not handler:
            raise RPCError(
                RPCError.METHOD_NOT_FOUND,
                f"Method not found: {method}"
            )

        try:
            if isinstance(params, dict):
                return handler(**params)
            elif isinstance(params, list):
                return handler(*params)
            else:
                return handler()

        except TypeError as e:
            raise RPCError(RPCError.INVALID_PARAMS, str(e))

    def handle_request(self, payload: Any) -> Optional[Any]:
        """Handle a single request or a batch. Returns None if nothing to send."""
        if isinstance(payload, list):
            if not payload:
                return make_error_response(RPCError.INVALID_REQUEST, "Empty batch", None)
            responses = []
            for req in payload:
                response = self._handle_single_request(req)
                if response is not None:
                    responses.append(response)
            return responses or None

        return self._handle_single_request(payload)

    def _handle_single_request(self, req: Any) -> Optional[Dict]:
        if not isinstance(req, dict):
            return make_error_response(RPCError.INVALID_REQUEST, "Invalid request", None)

        method = req.get('method')
        params = req.get('params', [])
        request_id = req.get('id')

        if not method:
            return make_error_response(RPCError.INVALID_REQUEST, "Method required", request_id)

        # No id means notification (no response)
        is_notification = 'id' not in req

        try:
            result = self.execute_method(method, params)

            if is_notification:
                return None

            return {
                'jsonrpc': '2.0',
                'result': result,
                'id': request_id,
            }

        except RPCError as e:
            if is_notification:
                return None
            return make_error_response(e.code, e.message, request_id)

        except Exception as e:
            logger.error(f"RPC method {method} failed: {e}")
            logger.debug(traceback.format_exc())
            if is_notification:
                return None
            return make_error_response(RPCError.INTERNAL_ERROR, str(e), request_id)


def make_error_response(code: int, message: str, request_id) -> Dict:
    """Create an error response."""
    return {
        'jsonrpc': '2.0',
        'error': {
            'code': code,
            'message': message,
        },
        'id': request_id,
    }


def create_app(methods: Dict[str, Callable], username: str = None, password: str = None) -> Flask:
    """
    Build the Flask RPC app.

    Args:
        methods: Dictionary of method name -> handler
        username: RPC username (auth disabled if None)
        password: RPC password

    Returns:
        Flask application
    """
    dispatcher = RPCDispatcher(username=username, password=password)
    dispatcher.register_methods(methods)

    app = Flask(__name__)
    app.config['RPC_DISPATCHER'] = dispatcher

    @app.route('/', methods=['POST'])
    def rpc():
        if dispatcher.auth_required:
            auth = request.authorization
            if auth is None or not dispatcher.check_auth(auth.username, auth.password):
                return Response(
                    "Unauthorized",
                    status=401,
                    headers={'WWW-Authenticate': 'Basic realm="Token Factory RPC"'},
                )

        payload = request.get_json(silent=True)
        if payload is None:
            return jsonify(make_error_response(RPCError.PARSE_ERROR, "Parse error", None))

        response = dispatcher.handle_request(payload)
        if response is None:
            return Response(status=204)
        return jsonify(response)

    @app.route('/status', methods=['GET'])
    def status():
        return jsonify({
            'status': 'online',
            'name': config.CLIENT_NAME,
            'version': config.CLIENT_VERSION,
            'chain_id': config.CHAIN_ID,
        })

    return app
