import pytest

from fee_vault.back_test.entities.vault_position import (
    FeeVaultGlobalState, VaultPosition, VaultPositionEntityException)
from fee_vault.entities.accounts import new_address
from fee_vault.entities.fee_vault import FeeVault
from fee_vault.entities.vault_token import VaultToken

ONE = 10**18


@pytest.fixture
def position():
    deployer = new_address()
    holder = new_address()
    token = VaultToken(owner=deployer, initial_supply=0)
    token.mint(holder, 1000 * ONE, caller=deployer)
    vault = FeeVault(token, entry_fee_basis_points=100, admin=deployer)
    return VaultPosition(vault, token, holder)


def test_vault_must_hold_the_token():
    deployer = new_address()
    vault = FeeVault(VaultToken(owner=deployer), entry_fee_basis_points=0, admin=deployer)
    with pytest.raises(VaultPositionEntityException):
        VaultPosition(vault, VaultToken(owner=deployer), new_address())


def test_deposit_tracks_fee_and_open_assets(position):
    shares = position.action_deposit(100 * ONE)

    assert shares == 99 * ONE
    assert position.shares == 99 * ONE
    assert position.open_assets == 100 * ONE
    assert position.fees_paid == ONE
    assert position.idle_assets == 900 * ONE
    assert position.balance == 999 * ONE


def test_deposit_more_than_idle_assets_fails(position):
    with pytest.raises(VaultPositionEntityException):
        position.action_deposit(1001 * ONE)


def test_mint_pays_gross_assets(position):
    assets = position.action_mint(99 * ONE)
    assert assets == 100 * ONE
    assert position.fees_paid == ONE
    assert position.idle_assets == 900 * ONE


def test_inflow_accrues_to_share_holders(position):
    position.action_deposit(100 * ONE)
    position.update_state(FeeVaultGlobalState(inflow=99 * ONE))

    assert position.vault.total_assets() == 198 * ONE
    assert position.balance == 900 * ONE + 198 * ONE


def test_redeem_everything_resets_open_assets(position):
    position.action_deposit(100 * ONE)
    position.update_state(FeeVaultGlobalState(inflow=ONE))

    assets = position.action_redeem(position.shares)

    assert assets == 100 * ONE
    assert position.shares == 0
    assert position.open_assets == 0
    assert position.idle_assets == 1000 * ONE


def test_withdraw_burns_shares(position):
    position.action_deposit(100 * ONE)
    shares = position.action_withdraw(33 * ONE)
    assert shares == 33 * ONE
    assert position.shares == 66 * ONE
    assert position.open_assets == 67 * ONE


def test_exits_beyond_the_position_fail(position):
    position.action_deposit(100 * ONE)
    with pytest.raises(VaultPositionEntityException):
        position.action_withdraw(100 * ONE)
    with pytest.raises(VaultPositionEntityException):
        position.action_redeem(100 * ONE)


@pytest.mark.parametrize("state", [
    FeeVaultGlobalState(deposits=-1),
    FeeVaultGlobalState(inflow=-1),
    FeeVaultGlobalState(deposits=1, withdrawals=1),
])
def test_invalid_state_is_rejected(position, state):
    with pytest.raises(VaultPositionEntityException):
        position.update_state(state)


def test_update_state_is_kept(position):
    state = FeeVaultGlobalState(deposits=5 * ONE)
    position.update_state(state)
    assert position.global_state == state
