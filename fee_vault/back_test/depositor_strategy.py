"""
Depositor Strategy Module

This module replays simulated deposit and withdrawal flows of a single holder
through a fee vault, so the cost of the entry fee and the effect of out-of-band
inflows on the holder's balance can be measured over time.
"""
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import List
from fractal.core.base import (
    BaseStrategy, Action, BaseStrategyParams,
    ActionToTake, NamedEntity)
from fractal.core.base.observations import ObservationsStorage
from fee_vault.config import configure_logging
from fee_vault.entities.accounts import new_address
from fee_vault.entities.fee_vault import FeeVault
from fee_vault.entities.vault_token import VaultToken
from fee_vault.back_test.constants import ASSET_DECIMALS, POSITION_NAME
from fee_vault.back_test.entities.vault_position import VaultPosition, FeeVaultGlobalState
from fee_vault.back_test.build_observations import build_observations
from fee_vault.back_test.units import to_base_units

@dataclass
class DepositorStrategyParams(BaseStrategyParams):
    """
    Parameters for configuring the DepositorStrategy.

    Attributes:
        INIT_BALANCE (float): Idle assets of the holder at start, in whole tokens (default: 100,000)
        ENTRY_FEE_BASIS_POINTS (int): Entry fee of the vault (default: 100, i.e. 1%)
        DECIMALS_OFFSET (int | None): Virtual share offset of the vault (default: None)
    """
    INIT_BALANCE: float = 100_000
    ENTRY_FEE_BASIS_POINTS: int = 100
    DECIMALS_OFFSET: int | None = None

class DepositorStrategy(BaseStrategy):
    """
    Strategy that deposits and withdraws whatever the observed flows ask for,
    capped by what the holder actually has.
    """
    def __init__(self, debug: bool = False, params: DepositorStrategyParams | None = None,
                 observations_storage: ObservationsStorage | None = None):
        """
        Initialize the DepositorStrategy.

        Args:
            debug (bool): Enable debug mode
            params (DepositorStrategyParams | None): Strategy parameters
            observations_storage (ObservationsStorage | None): Storage for observations
        """
        self._params: DepositorStrategyParams = None  # set for type hinting
        super().__init__(params=params, debug=debug, observations_storage=observations_storage)

    def set_up(self):
        """
        Set up the initial state of the strategy by:
        1. Deploying the asset token and the fee vault
        2. Funding the holder with the initial balance
        3. Registering the holder's vault position
        """
        deployer = new_address()
        holder = new_address()
        token = VaultToken(owner=deployer, initial_supply=0)
        token.mint(holder, to_base_units(self._params.INIT_BALANCE, ASSET_DECIMALS), caller=deployer)
        vault = FeeVault(
            token,
            entry_fee_basis_points=self._params.ENTRY_FEE_BASIS_POINTS,
            admin=deployer,
            decimals_offset=self._params.DECIMALS_OFFSET,
        )
        self.register_entity(NamedEntity(entity_name=POSITION_NAME, entity=VaultPosition(vault, token, holder)))

    def predict(self, *args, **kwargs) -> List[ActionToTake]:
        """
        Translate the observed flow into a vault action.

        1. Deposits are capped by the holder's idle assets
        2. Withdrawals are capped by the holder's withdrawable assets;
           a withdrawal covering the whole position redeems every share instead

        Returns:
            List[ActionToTake]: List of actions to take on the position
        """
        position: VaultPosition = self.get_entity(POSITION_NAME)
        state: FeeVaultGlobalState = position.global_state

        if state.deposits > 0:
            assets = min(state.deposits, position.idle_assets)
            # a deposit too small to mint a share would be rejected by the vault
            if assets > 0 and position.vault.preview_deposit(assets) > 0:
                return [self._position_action('deposit', {'assets': assets})]
        elif state.withdrawals > 0 and position.shares > 0:
            withdrawable = position.vault.max_withdraw(position.holder)
            if state.withdrawals >= withdrawable:
                return [self._position_action('redeem', {'shares': position.shares})]
            return [self._position_action('withdraw', {'assets': state.withdrawals})]
        return []

    def _position_action(self, action: str, args: dict) -> ActionToTake:
        return ActionToTake(
            entity_name=POSITION_NAME,
            action=Action(action=action, args=args)
        )


if __name__ == "__main__":
    configure_logging()
    observations = build_observations(datetime(2025, 1, 1, tzinfo=UTC), datetime(2025, 6, 30, tzinfo=UTC))
    params: DepositorStrategyParams = DepositorStrategyParams()
    strategy = DepositorStrategy(debug=True, params=params)
    result = strategy.run(observations)
    print(result.get_default_metrics())  # show metrics
    result.to_dataframe().to_csv('result_depositor.csv')  # save result to csv
