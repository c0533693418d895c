"""
Token Factory Handler
Resolves token factory custom messages and queries against the registry,
forwarding balance changes to the bank.
"""

import logging
from typing import Dict, Any, Optional

from core.bank import Bank
from core.coins import coins
from core.result import AppResponse, Event, Ok, Err, Result, to_binary
from .errors import TokenFactoryError, InvalidMessage
from .messages import (
    CreateDenom,
    MintTokens,
    BurnTokens,
    ForceTransfer,
    FullDenom,
    DenomMetadata,
    DenomAdmin,
    DenomsByCreator,
    Params,
    build_denom,
    parse_token_msg,
    parse_token_query,
)
from .registry import TokenRegistry
import config

logger = logging.getLogger(__name__)


def _error(kind: TokenFactoryError, detail: str = None) -> Err:
    message = kind.value if detail is None else f"{kind.value}: {detail}"
    return Err(message, kind=kind)


class TokenFactoryHandler:
    """
    Token factory custom message handler.

    Only create_denom touches the registry and only mint, burn and
    force_transfer touch the bank, so a failure never leaves one half
    applied. Burn and force_transfer perform no admin check; the bank
    decides whether they succeed.
    """

    def __init__(self, bank: Bank, registry: TokenRegistry = None):
        """
        Initialize handler.

        Args:
            bank: Ledger that holds balances
            registry: Registry to use (a fresh one if None)
        """
        self.bank = bank
        self.registry = registry if registry is not None else TokenRegistry()

        self._executors = {
            CreateDenom: self.create_denom,
            MintTokens: self.mint_tokens,
            BurnTokens: self.burn_tokens,
            ForceTransfer: self.force_transfer,
        }
        self._queries = {
            FullDenom: self._query_full_denom,
            DenomMetadata: self._query_metadata,
            DenomAdmin: self._query_admin,
            DenomsByCreator: self._query_denoms_by_creator,
            Params: self._query_params,
        }

    # ------------------------------------------------------------------
    # Execute
    # ------------------------------------------------------------------

    def handle(self, sender: str, msg: Dict[str, Any]) -> Optional[Result]:
        """
        Handle a custom message sent by sender.

        Returns:
            Result, or None if msg is not a token factory message
        """
        try:
            parsed = parse_token_msg(msg)
        except InvalidMessage as e:
            logger.debug(f"Rejected malformed token message from {sender}: {e}")
            return _error(TokenFactoryError.INVALID_MESSAGE, str(e))

        if parsed is None:
            return None

        return self._executors[type(parsed)](sender, parsed)

    def create_denom(self, sender: str, msg: CreateDenom) -> Result:
        denom = build_denom(sender, msg.subdenom)

        if not self.registry.register(denom, sender, msg.metadata):
            logger.debug(f"Denom {denom} already exists")
            return _error(TokenFactoryError.ALREADY_EXISTS)

        logger.info(f"Created denom {denom}")

        event = Event('create_denom')
        event.add_attribute('creator', sender)
        event.add_attribute('new_token_denom', denom)
        return Ok(AppResponse(
            events=[event],
            data=to_binary({'new_token_denom': denom}),
        ))

    def mint_tokens(self, sender: str, msg: MintTokens) -> Result:
        admin = self.registry.get_admin(msg.denom)
        if admin is None:
            logger.debug(f"Mint of unknown denom {msg.denom}")
            return _error(TokenFactoryError.NOT_FOUND)

        if admin != sender:
            logger.debug(f"Mint of {msg.denom} by {sender} rejected, admin is {admin}")
            return _error(TokenFactoryError.UNAUTHORIZED)

        result = self.bank.mint(msg.mint_to_address, coins(msg.amount, msg.denom))
        if result.is_err():
            return result

        logger.info(f"Minted {msg.amount}{msg.denom} to {msg.mint_to_address}")

        event = Event('mint_tokens')
        event.add_attribute('denom', msg.denom)
        event.add_attribute('amount', msg.amount)
        event.add_attribute('mint_to_address', msg.mint_to_address)
        return Ok(AppResponse(events=[event]))

    def burn_tokens(self, sender: str, msg: BurnTokens) -> Result:
        return self.bank.handle_msg(
            msg.burn_from_address,
            {'burn': {'amount': [c.to_dict() for c in coins(msg.amount, msg.denom)]}},
        )

    def force_transfer(self, sender: str, msg: ForceTransfer) -> Result:
        return self.bank.handle_msg(
            msg.from_address,
            {'send': {
                'to_address': msg.to_address,
                'amount': [c.to_dict() for c in coins(msg.amount, msg.denom)],
            }},
        )

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def handle_query(self, request: Dict[str, Any]) -> Optional[Result]:
        """
        Answer a token factory custom query.

        Returns:
            Result, or None if request is not a token factory query
        """
        try:
            parsed = parse_token_query(request)
        except InvalidMessage as e:
            return _error(TokenFactoryError.INVALID_MESSAGE, str(e))

        if parsed is None:
            return None

        return self._queries[type(parsed)](parsed)

    def _query_full_denom(self, query: FullDenom) -> Result:
        return _reply({'denom': build_denom(query.creator_addr, query.subdenom)})

    def _query_metadata(self, query: DenomMetadata) -> Result:
        if not self.registry.exists(query.denom):
            return _error(TokenFactoryError.NOT_FOUND)
        return _reply({'metadata': self.registry.get_metadata(query.denom)})

    def _query_admin(self, query: DenomAdmin) -> Result:
        admin = self.registry.get_admin(query.denom)
        if admin is None:
            return _error(TokenFactoryError.NOT_FOUND)
        return _reply({'admin': admin})

    def _query_denoms_by_creator(self, query: DenomsByCreator) -> Result:
        return _reply({'denoms': self.registry.get_denoms(query.creator)})

    def _query_params(self, query: Params) -> Result:
        return _reply({'params': {'denom_creation_fee': list(config.DENOM_CREATION_FEE)}})


def _reply(payload: Dict[str, Any]) -> Result:
    return Ok(AppResponse(data=to_binary(payload)))
