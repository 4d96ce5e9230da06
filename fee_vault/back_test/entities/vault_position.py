from dataclasses import dataclass
from fractal.core.base.entity import BaseEntity, EntityException, GlobalState, InternalState
from fee_vault.entities.fee_vault import FeeVault
from fee_vault.entities.vault_token import VaultToken


class VaultPositionEntityException(EntityException):
    """
    Exception raised for errors in the Vault Position entity.
    """

@dataclass
class FeeVaultGlobalState(GlobalState):
    deposits: int = 0
    withdrawals: int = 0
    inflow: int = 0

@dataclass
class VaultPositionInternalState(InternalState):
    shares: int = 0
    open_assets: int = 0
    fees_paid: int = 0

class VaultPosition(BaseEntity):
    """
    Represents one holder's position in a fee vault.

    The holder's idle assets stay on the asset token; everything else is the
    withdrawable value of the holder's shares.
    """

    def __init__(self, vault: FeeVault, token: VaultToken, holder: str):
        if vault.asset is not token:
            raise VaultPositionEntityException("Vault must hold the given token")

        self._vault = vault
        self._token = token
        self._holder = holder

        super().__init__()

    def _initialize_states(self):
        self._global_state: FeeVaultGlobalState = FeeVaultGlobalState()
        self._internal_state: VaultPositionInternalState = VaultPositionInternalState()

    def action_deposit(self, assets: int) -> int:
        # deposit idle assets of the holder to the vault
        # receive shares in return

        if assets < 0:
            raise VaultPositionEntityException("Assets must be greater than 0")
        if assets > self.idle_assets:
            raise VaultPositionEntityException("Assets to deposit are greater than the idle assets")

        fee = self._vault.calculate_entry_fee(assets)
        self._token.approve(self._vault.address, assets, caller=self._holder)
        shares_to_mint = self._vault.deposit(assets, self._holder, caller=self._holder)

        self._update_internal_state(shares_to_mint, assets)
        self._internal_state.fees_paid += fee

        return shares_to_mint

    def action_mint(self, shares: int) -> int:
        # mint exact shares, paying whatever assets the vault asks for

        if shares < 0:
            raise VaultPositionEntityException("Shares must be greater than 0")

        assets_to_pay = self._vault.preview_mint(shares)
        if assets_to_pay > self.idle_assets:
            raise VaultPositionEntityException("Not enough idle assets to mint the requested shares")

        fee = self._vault.calculate_entry_fee(assets_to_pay)
        self._token.approve(self._vault.address, assets_to_pay, caller=self._holder)
        assets_paid = self._vault.mint(shares, self._holder, caller=self._holder)

        self._update_internal_state(shares, assets_paid)
        self._internal_state.fees_paid += fee

        return assets_paid

    def action_redeem(self, shares: int) -> int:
        # redeem the shares from the vault
        # receive assets in return

        if shares < 0:
            raise VaultPositionEntityException("Shares must be greater than 0")
        if shares > self.shares:
            raise VaultPositionEntityException("Shares to redeem are greater than the available shares")

        assets_to_withdraw = self._vault.redeem(shares, self._holder, self._holder, caller=self._holder)

        self._update_internal_state(-shares, -assets_to_withdraw)

        return assets_to_withdraw

    def action_withdraw(self, assets: int) -> int:
        # withdraw assets from the vault
        # burn shares required to withdraw the assets

        if assets < 0:
            raise VaultPositionEntityException("Assets must be greater than 0")
        if assets > self._vault.max_withdraw(self._holder):
            raise VaultPositionEntityException("Not enough withdrawable assets")

        shares_to_burn = self._vault.withdraw(assets, self._holder, self._holder, caller=self._holder)

        self._update_internal_state(-shares_to_burn, -assets)

        return shares_to_burn

    def update_state(self, state: FeeVaultGlobalState):
        if state.deposits < 0 or state.withdrawals < 0 or state.inflow < 0:
            raise VaultPositionEntityException("Deposits, withdrawals and inflow must be greater than 0")
        if state.deposits > 0 and state.withdrawals > 0:
            raise VaultPositionEntityException("Deposits and withdrawals cannot be both greater than 0")

        # inflow lands on the vault account directly, outside deposit/mint
        if state.inflow > 0:
            self._token.mint(self._vault.address, state.inflow, caller=self._token.owner)

        self._global_state = state

    def _update_internal_state(self, delta_shares: int, delta_assets: int):
        """
        open assets | shares | delta assets | delta shares
        100         | 99     | 100          | 99
        0           | 0      | -102         | -99
        """
        self._internal_state.shares += delta_shares
        self._internal_state.open_assets += delta_assets

        if self._internal_state.shares == 0:
            self._internal_state.open_assets = 0

    @property
    def balance(self) -> int:
        # idle assets plus what the shares can be withdrawn for
        return self.idle_assets + self._vault.max_withdraw(self._holder)

    @property
    def vault(self) -> FeeVault:
        return self._vault

    @property
    def holder(self) -> str:
        return self._holder

    @property
    def shares(self) -> int:
        return self._vault.balance_of(self._holder)

    @property
    def idle_assets(self) -> int:
        return self._token.balance_of(self._holder)

    @property
    def open_assets(self) -> int:
        return self._internal_state.open_assets

    @property
    def fees_paid(self) -> int:
        return self._internal_state.fees_paid
