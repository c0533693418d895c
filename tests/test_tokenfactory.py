"""
Tests for the token factory registry and handler.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.bank import Bank
from core.coins import coins
from core.result import from_binary
from tokenfactory import (
    TokenFactoryError,
    InvalidMessage,
    TokenRegistry,
    TokenFactoryHandler,
    CreateDenom,
    MintTokens,
    BurnTokens,
    ForceTransfer,
    build_denom,
    parse_token_msg,
    wrap_custom,
)


METADATA = {
    'symbol': 'USD',
    'description': 'description',
    'denom_units': [{'denom': 'usd', 'exponent': 6, 'aliases': []}],
    'base': None,
    'display': None,
    'name': None,
}


def create_msg(subdenom: str, metadata=None):
    body = {'subdenom': subdenom}
    if metadata is not None:
        body['metadata'] = metadata
    return wrap_custom({'create_denom': body})


def mint_msg(denom: str, amount, to: str):
    return wrap_custom({'mint_tokens': {'denom': denom, 'amount': amount, 'mint_to_address': to}})


def burn_msg(denom: str, amount, source: str):
    return wrap_custom({'burn_tokens': {'denom': denom, 'amount': amount, 'burn_from_address': source}})


def transfer_msg(denom: str, amount, source: str, to: str):
    return wrap_custom({'force_transfer': {
        'denom': denom,
        'amount': amount,
        'from_address': source,
        'to_address': to,
    }})


class TestRegistry:
    """Test TokenRegistry class."""

    @pytest.fixture
    def registry(self):
        return TokenRegistry()

    def test_register(self, registry):
        assert registry.register("factory/a/x", "a") == True
        assert registry.exists("factory/a/x")
        assert registry.get_admin("factory/a/x") == "a"
        assert registry.get_denoms("a") == ["factory/a/x"]

    def test_register_twice_rejected(self, registry):
        registry.register("factory/a/x", "a", {'symbol': 'X'})

        assert registry.register("factory/a/x", "b", {'symbol': 'Y'}) == False
        assert registry.get_admin("factory/a/x") == "a"
        assert registry.get_denoms("a") == ["factory/a/x"]
        assert registry.get_denoms("b") == []
        assert registry.get_metadata("factory/a/x") == {'symbol': 'X'}

    def test_metadata_absent_vs_missing(self, registry):
        registry.register("factory/a/x", "a")

        assert registry.get_metadata("factory/a/x") is None
        assert "factory/a/x" not in registry.metadata
        assert registry.exists("factory/a/x")

    def test_empty_metadata_is_stored(self, registry):
        registry.register("factory/a/x", "a", {})

        assert registry.get_metadata("factory/a/x") == {}

    def test_metadata_copied(self, registry):
        metadata = {'denom_units': []}
        registry.register("factory/a/x", "a", metadata)
        metadata['denom_units'].append('changed')

        stored = registry.get_metadata("factory/a/x")
        assert stored == {'denom_units': []}

        stored['denom_units'].append('changed')
        assert registry.get_metadata("factory/a/x") == {'denom_units': []}

    def test_get_denoms_returns_copy(self, registry):
        registry.register("factory/a/x", "a")
        registry.get_denoms("a").append("bogus")

        assert registry.get_denoms("a") == ["factory/a/x"]


class TestMessages:
    """Test token message decoding."""

    def test_build_denom(self):
        assert build_denom("orai1abc", "USD") == "factory/orai1abc/USD"

    def test_parse_each_tag(self):
        assert parse_token_msg(create_msg("USD")) == CreateDenom(subdenom="USD")
        assert parse_token_msg(mint_msg("d", "5", "b")) == MintTokens(denom="d", amount=5, mint_to_address="b")
        assert parse_token_msg(burn_msg("d", "5", "b")) == BurnTokens(denom="d", amount=5, burn_from_address="b")
        assert parse_token_msg(transfer_msg("d", "5", "a", "b")) == ForceTransfer(
            denom="d", amount=5, from_address="a", to_address="b"
        )

    def test_round_trip_wire_form(self):
        msg = MintTokens(denom="d", amount=5, mint_to_address="b")

        assert msg.to_dict() == {'mint_tokens': {'denom': "d", 'amount': "5", 'mint_to_address': "b"}}
        assert parse_token_msg(wrap_custom(msg.to_dict())) == msg

    @pytest.mark.parametrize("msg", [
        None,
        "custom",
        {'bank': {'send': {}}},
        {'custom': {'other_module': {'do': {}}}},
        {'custom': {'token': {'change_admin': {}}}},
        {'custom': {'token': {}}},
        {'custom': {'token': {'create_denom': {'subdenom': 'a'}, 'mint_tokens': {}}}},
        {'custom': "token"},
    ])
    def test_non_token_messages_decline(self, msg):
        assert parse_token_msg(msg) is None

    @pytest.mark.parametrize("msg", [
        wrap_custom({'create_denom': "USD"}),
        wrap_custom({'create_denom': {}}),
        wrap_custom({'create_denom': {'subdenom': 5}}),
        wrap_custom({'create_denom': {'subdenom': "USD", 'metadata': "x"}}),
        mint_msg("d", "-1", "b"),
        mint_msg("d", "ten", "b"),
        mint_msg("d", "5", None),
        burn_msg(None, "5", "b"),
        transfer_msg("d", "5", "a", 7),
    ])
    def test_malformed_fields_raise(self, msg):
        with pytest.raises(InvalidMessage):
            parse_token_msg(msg)


class TestHandler:
    """Test TokenFactoryHandler class."""

    @pytest.fixture
    def bank(self):
        return Bank()

    @pytest.fixture
    def handler(self, bank):
        return TokenFactoryHandler(bank)

    def test_create_denom(self, handler):
        """Test denom creation returns the new denom."""
        result = handler.handle("alice", create_msg("USD"))

        assert result.is_ok()
        assert from_binary(result.unwrap().data) == {'new_token_denom': "factory/alice/USD"}
        assert handler.registry.get_admin("factory/alice/USD") == "alice"

        event = result.unwrap().events[0]
        assert event.type == 'create_denom'
        assert event.get_attribute('new_token_denom') == "factory/alice/USD"

    def test_create_denom_twice(self, handler):
        """Test second creation fails and changes nothing."""
        handler.handle("alice", create_msg("USD", METADATA))
        before = handler.registry.to_dict()

        result = handler.handle("alice", create_msg("USD", {'symbol': 'OTHER'}))

        assert result.is_err()
        assert result.error == "token exists"
        assert result.kind == TokenFactoryError.ALREADY_EXISTS
        assert handler.registry.to_dict() == before

    def test_same_subdenom_different_creators(self, handler):
        first = handler.handle("alice", create_msg("USD"))
        second = handler.handle("bob", create_msg("USD"))

        assert first.is_ok() and second.is_ok()
        assert from_binary(first.unwrap().data)['new_token_denom'] == "factory/alice/USD"
        assert from_binary(second.unwrap().data)['new_token_denom'] == "factory/bob/USD"
        assert handler.registry.size() == 2

    def test_create_does_not_touch_bank(self, handler, bank):
        handler.handle("alice", create_msg("USD"))

        assert bank.balances == {}
        assert bank.supply == {}

    def test_metadata_round_trip(self, handler):
        handler.handle("alice", create_msg("USD", METADATA))
        handler.handle("alice", create_msg("EUR"))

        assert handler.registry.get_metadata("factory/alice/USD") == METADATA
        assert handler.registry.get_metadata("factory/alice/EUR") is None

    def test_denoms_by_creator_order(self, handler):
        subdenoms = ["USD", "EUR", "BTC", "ETH"]
        for subdenom in subdenoms:
            handler.handle("alice", create_msg(subdenom))
        handler.handle("alice", create_msg("USD"))

        denoms = handler.registry.get_denoms("alice")
        assert len(denoms) == len(subdenoms)
        assert denoms == [f"factory/alice/{s}" for s in subdenoms]

    def test_mint_unknown_denom(self, handler, bank):
        result = handler.handle("alice", mint_msg("factory/alice/USD", "100", "bob"))

        assert result.is_err()
        assert result.error == "token does not exist"
        assert result.kind == TokenFactoryError.NOT_FOUND
        assert bank.get_balance("bob", "factory/alice/USD") == 0

    def test_mint_by_non_admin(self, handler, bank):
        handler.handle("alice", create_msg("USD"))

        result = handler.handle("carol", mint_msg("factory/alice/USD", "100", "carol"))

        assert result.is_err()
        assert result.error == "sender is not token admin"
        assert result.kind == TokenFactoryError.UNAUTHORIZED
        assert bank.get_supply("factory/alice/USD") == 0

    def test_mint_by_admin(self, handler, bank):
        handler.handle("alice", create_msg("USD"))

        result = handler.handle("alice", mint_msg("factory/alice/USD", "100", "bob"))

        assert result.is_ok()
        assert result.unwrap().data is None
        assert bank.get_balance("bob", "factory/alice/USD") == 100

    def test_mint_overflow_propagated(self, handler, bank):
        handler.handle("alice", create_msg("USD"))
        handler.handle("alice", mint_msg("factory/alice/USD", str(2 ** 128 - 1), "bob"))

        result = handler.handle("alice", mint_msg("factory/alice/USD", "1", "bob"))

        assert result.is_err()
        assert "overflow" in result.error

    def test_burn_is_pass_through(self, handler, bank):
        """Test burn needs no admin, only funds."""
        handler.handle("alice", create_msg("USD"))
        handler.handle("alice", mint_msg("factory/alice/USD", "100", "bob"))

        result = handler.handle("mallory", burn_msg("factory/alice/USD", "30", "bob"))

        assert result.is_ok()
        assert bank.get_balance("bob", "factory/alice/USD") == 70
        assert bank.get_supply("factory/alice/USD") == 70

    def test_burn_error_from_bank(self, handler, bank):
        result = handler.handle("alice", burn_msg("factory/alice/USD", "1", "bob"))

        assert result.is_err()
        assert result.error.startswith("insufficient funds")
        assert result.kind is None

    def test_burn_unregistered_denom_held(self, handler, bank):
        """Test burn of a denom the registry never saw is left to the bank."""
        bank.mint("bob", coins(5, "uorai"))

        result = handler.handle("bob", burn_msg("uorai", "5", "bob"))

        assert result.is_ok()
        assert bank.get_balance("bob", "uorai") == 0

    def test_force_transfer_is_pass_through(self, handler, bank):
        handler.handle("alice", create_msg("USD"))
        handler.handle("alice", mint_msg("factory/alice/USD", "100", "bob"))

        result = handler.handle("mallory", transfer_msg("factory/alice/USD", "40", "bob", "carol"))

        assert result.is_ok()
        assert bank.get_balance("bob", "factory/alice/USD") == 60
        assert bank.get_balance("carol", "factory/alice/USD") == 40

    def test_force_transfer_insufficient(self, handler, bank):
        result = handler.handle("alice", transfer_msg("factory/alice/USD", "1", "bob", "carol"))

        assert result.is_err()
        assert "insufficient funds" in result.error

    def test_invalid_message(self, handler):
        result = handler.handle("alice", mint_msg("factory/alice/USD", "-1", "bob"))

        assert result.is_err()
        assert result.kind == TokenFactoryError.INVALID_MESSAGE
        assert result.error.startswith("invalid token message")

    def test_declines_other_messages(self, handler):
        assert handler.handle("alice", {'custom': {'other': {}}}) is None
        assert handler.handle("alice", {'bank': {'send': {}}}) is None

    def test_scenario(self, handler, bank):
        """Create, mint to B, rejected mint by C."""
        denom = "factory/A/USD"

        created = handler.handle("A", create_msg("USD"))
        assert from_binary(created.unwrap().data) == {'new_token_denom': denom}

        assert handler.handle("A", mint_msg(denom, "100", "B")).is_ok()
        assert bank.get_balance("B", denom) == 100

        rejected = handler.handle("C", mint_msg(denom, "50", "B"))
        assert rejected.error == "sender is not token admin"
        assert bank.get_balance("B", denom) == 100


class TestQueries:
    """Test token factory queries."""

    @pytest.fixture
    def handler(self):
        handler = TokenFactoryHandler(Bank())
        handler.handle("alice", create_msg("USD", METADATA))
        handler.handle("alice", create_msg("EUR"))
        return handler

    def query(self, handler, body):
        result = handler.handle_query(wrap_custom(body))
        return from_binary(result.unwrap().data)

    def test_full_denom(self, handler):
        reply = self.query(handler, {'full_denom': {'creator_addr': "bob", 'subdenom': "X"}})

        assert reply == {'denom': "factory/bob/X"}

    def test_metadata(self, handler):
        assert self.query(handler, {'metadata': {'denom': "factory/alice/USD"}}) == {'metadata': METADATA}
        assert self.query(handler, {'metadata': {'denom': "factory/alice/EUR"}}) == {'metadata': None}

    def test_metadata_unknown_denom(self, handler):
        result = handler.handle_query(wrap_custom({'metadata': {'denom': "factory/x/Y"}}))

        assert result.error == "token does not exist"

    def test_admin(self, handler):
        assert self.query(handler, {'admin': {'denom': "factory/alice/USD"}}) == {'admin': "alice"}
        assert handler.handle_query(wrap_custom({'admin': {'denom': "nope"}})).is_err()

    def test_denoms_by_creator(self, handler):
        reply = self.query(handler, {'denoms_by_creator': {'creator': "alice"}})

        assert reply == {'denoms': ["factory/alice/USD", "factory/alice/EUR"]}
        assert self.query(handler, {'denoms_by_creator': {'creator': "bob"}}) == {'denoms': []}

    def test_params(self, handler):
        assert self.query(handler, {'params': {}}) == {'params': {'denom_creation_fee': []}}

    def test_declines_other_queries(self, handler):
        assert handler.handle_query({'custom': {'other': {}}}) is None

    def test_malformed_query(self, handler):
        result = handler.handle_query(wrap_custom({'admin': {}}))

        assert result.kind == TokenFactoryError.INVALID_MESSAGE
