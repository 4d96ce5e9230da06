import pytest

from fee_vault.entities.accounts import new_address
from fee_vault.entities.fee_vault import FeeVault
from fee_vault.entities.vault_token import VaultToken

ONE = 10**18


@pytest.fixture
def owner():
    return new_address()


@pytest.fixture
def other_account():
    return new_address()


@pytest.fixture
def treasury():
    return new_address()


@pytest.fixture
def token(owner, other_account):
    token = VaultToken(owner=owner)
    token.mint(other_account, 1000 * ONE, caller=owner)
    return token


@pytest.fixture
def vault(token, owner, treasury):
    # 1% entry fee routed to a dedicated treasury account
    return FeeVault(token, entry_fee_basis_points=100, admin=owner, entry_fee_recipient=treasury)


@pytest.fixture
def deposit(token, vault):
    def _deposit(account: str, assets: int, receiver: str | None = None) -> int:
        token.approve(vault.address, assets, caller=account)
        return vault.deposit(assets, receiver or account, caller=account)
    return _deposit
