from dataclasses import dataclass

from fee_vault.constants import BPS_DENOMINATOR
from fee_vault.entities.precision import Rounding, mul_div, mul_div_down, mul_div_up
from fee_vault.errors import ZeroShares


@dataclass(frozen=True)
class ConversionEngine:
    """
    Exchange rate between assets and shares at one point in time.

    Built from the vault's total assets, total share supply and entry fee; every
    preview the vault makes goes through one of these, so entry and exit paths
    always agree on the rate.

    With `decimals_offset` unset the rate is `total_supply / total_assets`, and an
    empty vault (or one whose assets are all gone) converts 1:1. With
    `decimals_offset = k` the rate carries `10**k` virtual shares and one virtual
    asset, which makes share-price inflation on a near-empty vault unprofitable.
    """
    total_assets: int
    total_supply: int
    entry_fee_basis_points: int = 0
    decimals_offset: int | None = None

    @property
    def at_bootstrap_rate(self) -> bool:
        return self.decimals_offset is None and (self.total_supply == 0 or self.total_assets == 0)

    def entry_fee(self, assets: int) -> int:
        # fee on the gross amount, never more than the amount itself
        return mul_div_down(assets, self.entry_fee_basis_points, BPS_DENOMINATOR)

    def convert_to_shares(self, assets: int, rounding: Rounding = Rounding.DOWN) -> int:
        if self.decimals_offset is not None:
            return mul_div(assets, self.total_supply + 10**self.decimals_offset, self.total_assets + 1, rounding)
        if self.at_bootstrap_rate:
            return assets
        return mul_div(assets, self.total_supply, self.total_assets, rounding)

    def convert_to_assets(self, shares: int, rounding: Rounding = Rounding.DOWN) -> int:
        if self.decimals_offset is not None:
            return mul_div(shares, self.total_assets + 1, self.total_supply + 10**self.decimals_offset, rounding)
        if self.total_supply == 0:
            return 0
        return mul_div(shares, self.total_assets, self.total_supply, rounding)

    def preview_deposit(self, assets: int) -> int:
        # Preview the number of shares minted for depositing `assets`.
        # The fee is taken first, so only the net amount is converted.
        net_assets = assets - self.entry_fee(assets)
        return self.convert_to_shares(net_assets, Rounding.DOWN)

    def preview_mint(self, shares: int) -> int:
        # Preview the gross assets needed to mint `shares`.
        if shares == 0:
            return 0
        if self.entry_fee_basis_points >= BPS_DENOMINATOR:
            raise ZeroShares(0, "entry fee takes the whole deposit")
        if self.at_bootstrap_rate:
            net_assets = shares
        else:
            net_assets = self.convert_to_assets(shares, Rounding.UP)
        # smallest gross whose floor-rounded fee still leaves net_assets
        return mul_div_up(net_assets, BPS_DENOMINATOR, BPS_DENOMINATOR - self.entry_fee_basis_points)

    def preview_withdraw(self, assets: int) -> int:
        # Preview the shares burned to pay out exactly `assets`.
        return self.convert_to_shares(assets, Rounding.UP)

    def preview_redeem(self, shares: int) -> int:
        # Preview the assets paid out for burning `shares`.
        return self.convert_to_assets(shares, Rounding.DOWN)
