"""Tests for arbagent.session: credential lifecycle."""

import pytest
from eth_account import Account

from arbagent.errors import InvalidCredential, InvalidArguments, NoSession
from arbagent.session import WalletSession

from conftest import OTHER_KEY, TEST_ADDRESS, TEST_KEY


class TestSetCredential:
    def test_returns_derived_address(self):
        session = WalletSession()
        identity = session.set_credential(TEST_KEY)
        assert identity.address == TEST_ADDRESS
        assert session.get_identity() == identity

    def test_accepts_key_without_prefix(self):
        session = WalletSession()
        identity = session.set_credential(TEST_KEY[2:])
        assert identity.address == TEST_ADDRESS

    def test_replaces_existing_credential(self):
        session = WalletSession()
        session.set_credential(TEST_KEY)
        identity = session.set_credential(OTHER_KEY)
        assert identity.address == Account.from_key(OTHER_KEY).address
        assert session.get_identity().address != TEST_ADDRESS

    @pytest.mark.parametrize("material", ["", "   ", "0x1234", "not-a-key",
                                          "0x" + "zz" * 32])
    def test_invalid_material_raises(self, material):
        session = WalletSession()
        with pytest.raises(InvalidCredential):
            session.set_credential(material)
        assert session.get_identity() is None

    def test_invalid_credential_is_invalid_arguments(self):
        assert issubclass(InvalidCredential, InvalidArguments)

    def test_failed_replace_keeps_previous(self):
        session = WalletSession()
        session.set_credential(TEST_KEY)
        with pytest.raises(InvalidCredential):
            session.set_credential("0xdeadbeef")
        assert session.get_identity().address == TEST_ADDRESS

    def test_error_does_not_echo_material(self):
        session = WalletSession()
        bad = "0x" + "12" * 31 + "zz"
        with pytest.raises(InvalidCredential) as exc_info:
            session.set_credential(bad)
        assert bad not in str(exc_info.value)


class TestClearCredential:
    def test_clear_removes_identity(self):
        session = WalletSession()
        session.set_credential(TEST_KEY)
        session.clear_credential()
        assert session.get_identity() is None
        assert not session.has_credential

    def test_clear_is_idempotent(self):
        session = WalletSession()
        session.clear_credential()
        session.clear_credential()
        assert session.get_identity() is None

    def test_require_account_without_credential(self):
        with pytest.raises(NoSession):
            WalletSession().require_account()


def test_sessions_are_independent():
    a = WalletSession()
    b = WalletSession()
    a.set_credential(TEST_KEY)
    assert b.get_identity() is None
