import logging
from contextlib import ExitStack, contextmanager
from dataclasses import replace

from fee_vault.config import VaultConfig
from fee_vault.constants import DEFAULT_SHARE_NAME, DEFAULT_SHARE_SYMBOL, DEFAULT_DECIMALS, MAX_UINT256
from fee_vault.entities.accounts import is_null_account
from fee_vault.entities.asset_ledger import AssetLedger, Checkpointable
from fee_vault.entities.conversion import ConversionEngine
from fee_vault.entities.events import (
    Deposit, EntryFeeBasisPointsUpdated, EntryFeeCharged, EntryFeeRecipientUpdated, Withdraw)
from fee_vault.entities.fee_config import FeeConfiguration
from fee_vault.entities.fungible_token import FungibleToken
from fee_vault.entities.precision import check_amount
from fee_vault.errors import (
    ExceedsMaxRedeem, ExceedsMaxWithdraw, InsufficientAllowance, InsufficientBalance,
    InvalidReceiver, Unauthorized, ZeroShares)

logger = logging.getLogger(__name__)


class FeeVault(FungibleToken):
    """
    Tokenized vault over a single asset ledger that charges an entry fee.

    The vault is its own share ledger: shares are minted on deposit/mint and
    burned on withdraw/redeem, and are otherwise ordinary transferable tokens.
    Total assets are always read from the asset ledger, so assets sent straight
    to `address` count towards the exchange rate.

    Every public call runs under one re-entrant lock. State-changing calls run in
    an atomic section: the share ledger, the fee configuration and (when it is
    Checkpointable) the asset ledger are checkpointed first and restored if any
    step raises. On an asset ledger without checkpoints, assets already pulled
    into the vault are sent back to the caller instead.
    """

    def __init__(
        self,
        asset: AssetLedger,
        entry_fee_basis_points: int,
        admin: str,
        entry_fee_recipient: str | None = None,
        name: str = DEFAULT_SHARE_NAME,
        symbol: str = DEFAULT_SHARE_SYMBOL,
        decimals_offset: int | None = None,
        address: str | None = None,
    ):
        if not isinstance(asset, AssetLedger):
            raise TypeError(f"{asset!r} does not implement the asset ledger interface")
        asset_decimals = getattr(asset, "decimals", DEFAULT_DECIMALS)
        super().__init__(name, symbol, asset_decimals + (decimals_offset or 0), address)
        self._asset = asset
        self._decimals_offset = decimals_offset
        self._fee_config = FeeConfiguration(
            admin=admin,
            entry_fee_basis_points=entry_fee_basis_points,
            entry_fee_recipient=admin if entry_fee_recipient is None else entry_fee_recipient,
        )
        self._compensations = []

    @classmethod
    def from_config(cls, asset: AssetLedger, admin: str, config: VaultConfig, address: str | None = None) -> "FeeVault":
        return cls(
            asset,
            entry_fee_basis_points=config.entry_fee_basis_points,
            admin=admin,
            entry_fee_recipient=config.entry_fee_recipient,
            name=config.name,
            symbol=config.symbol,
            decimals_offset=config.decimals_offset,
            address=address,
        )

    @property
    def asset(self) -> AssetLedger:
        return self._asset

    @property
    def admin(self) -> str:
        return self._fee_config.admin

    @property
    def decimals_offset(self) -> int | None:
        return self._decimals_offset

    @property
    def entry_fee_basis_points(self) -> int:
        with self._lock:
            return self._fee_config.entry_fee_basis_points

    @property
    def entry_fee_recipient(self) -> str:
        with self._lock:
            return self._fee_config.entry_fee_recipient

    def get_entry_fee_basis_points(self) -> int:
        return self.entry_fee_basis_points

    def get_entry_fee_recipient(self) -> str:
        return self.entry_fee_recipient

    def set_entry_fee_basis_points(self, basis_points: int, *, caller: str) -> None:
        with self._atomic("set_entry_fee_basis_points"):
            previous = self._fee_config.set_entry_fee_basis_points(basis_points, caller)
            self._emit(EntryFeeBasisPointsUpdated(previous=previous, current=basis_points))
        logger.info("entry fee changed from %s to %s bps by %s", previous, basis_points, caller)

    def set_entry_fee_recipient(self, recipient: str, *, caller: str) -> None:
        with self._atomic("set_entry_fee_recipient"):
            previous = self._fee_config.set_entry_fee_recipient(recipient, caller)
            self._emit(EntryFeeRecipientUpdated(previous=previous, current=recipient))
        logger.info("entry fee recipient changed from %s to %s by %s", previous, recipient, caller)

    def total_assets(self) -> int:
        return self._asset.balance_of(self.address)

    def conversion(self) -> ConversionEngine:
        with self._lock:
            return ConversionEngine(
                total_assets=self.total_assets(),
                total_supply=self._total_supply,
                entry_fee_basis_points=self._fee_config.entry_fee_basis_points,
                decimals_offset=self._decimals_offset,
            )

    def calculate_entry_fee(self, assets: int) -> int:
        return self.conversion().entry_fee(check_amount(assets, "assets"))

    def convert_to_shares(self, assets: int) -> int:
        return self.conversion().convert_to_shares(check_amount(assets, "assets"))

    def convert_to_assets(self, shares: int) -> int:
        return self.conversion().convert_to_assets(check_amount(shares, "shares"))

    def preview_deposit(self, assets: int) -> int:
        return self.conversion().preview_deposit(check_amount(assets, "assets"))

    def preview_mint(self, shares: int) -> int:
        return self.conversion().preview_mint(check_amount(shares, "shares"))

    def preview_withdraw(self, assets: int) -> int:
        return self.conversion().preview_withdraw(check_amount(assets, "assets"))

    def preview_redeem(self, shares: int) -> int:
        return self.conversion().preview_redeem(check_amount(shares, "shares"))

    def max_deposit(self, receiver: str) -> int:
        return MAX_UINT256

    def max_mint(self, receiver: str) -> int:
        return MAX_UINT256

    def max_withdraw(self, owner: str) -> int:
        with self._lock:
            return self.preview_redeem(self.balance_of(owner))

    def max_redeem(self, owner: str) -> int:
        return self.balance_of(owner)

    def deposit(self, assets: int, receiver: str, *, caller: str) -> int:
        with self._atomic("deposit"):
            check_amount(assets, "assets")
            self._check_receiver(receiver)
            engine = self.conversion()
            shares = engine.preview_deposit(assets)
            if shares == 0:
                raise ZeroShares(assets)
            self._enter(caller, receiver, assets, shares, engine.entry_fee(assets))
        return shares

    def mint(self, shares: int, receiver: str, *, caller: str) -> int:
        with self._atomic("mint"):
            check_amount(shares, "shares")
            self._check_receiver(receiver)
            if shares == 0:
                raise ZeroShares(0, "cannot mint zero shares")
            engine = self.conversion()
            assets = engine.preview_mint(shares)
            self._enter(caller, receiver, assets, shares, engine.entry_fee(assets))
        return assets

    def withdraw(self, assets: int, receiver: str, owner: str, *, caller: str) -> int:
        with self._atomic("withdraw"):
            check_amount(assets, "assets")
            self._check_receiver(receiver)
            shares = self.preview_withdraw(assets)
            if shares > self.max_redeem(owner):
                raise ExceedsMaxWithdraw(owner, assets, self.max_withdraw(owner))
            self._exit(caller, receiver, owner, assets, shares)
        return shares

    def redeem(self, shares: int, receiver: str, owner: str, *, caller: str) -> int:
        with self._atomic("redeem"):
            check_amount(shares, "shares")
            self._check_receiver(receiver)
            max_shares = self.max_redeem(owner)
            if shares > max_shares:
                raise ExceedsMaxRedeem(owner, shares, max_shares)
            assets = self.preview_redeem(shares)
            self._exit(caller, receiver, owner, assets, shares)
        return assets

    def checkpoint(self):
        with self._lock:
            return super().checkpoint(), replace(self._fee_config)

    def restore(self, checkpoint) -> None:
        token_checkpoint, fee_config = checkpoint
        with self._lock:
            super().restore(token_checkpoint)
            self._fee_config = fee_config

    @contextmanager
    def _atomic(self, operation: str):
        with ExitStack() as stack:
            stack.enter_context(self._lock)
            ledgers = [self]
            if isinstance(self._asset, Checkpointable):
                stack.enter_context(self._asset.lock)
                ledgers.append(self._asset)
            checkpoints = [(ledger, ledger.checkpoint()) for ledger in ledgers]
            self._compensations = []
            try:
                yield
            except Exception as e:
                # asset transfers on a ledger without checkpoints are undone by reverse transfers
                for compensate in reversed(self._compensations):
                    compensate()
                for ledger, checkpoint in reversed(checkpoints):
                    ledger.restore(checkpoint)
                logger.warning("%s rolled back: %s", operation, e)
                raise
            finally:
                self._compensations = []

    def _check_receiver(self, receiver: str):
        if is_null_account(receiver):
            raise InvalidReceiver(receiver)

    def _enter(self, caller: str, receiver: str, assets: int, shares: int, fee: int):
        allowance = self._asset.allowance(caller, self.address)
        if allowance < assets:
            raise InsufficientAllowance(caller, self.address, allowance, assets)
        balance = self._asset.balance_of(caller)
        if balance < assets:
            raise InsufficientBalance(caller, balance, assets)
        check_amount(self._total_supply + shares, "total supply")

        # pull the gross amount, then pass the fee on out of the vault's own balance
        self._asset.transfer_from(caller, self.address, assets, caller=self.address)
        if not isinstance(self._asset, Checkpointable):
            self._compensations.append(lambda: self._asset.transfer(caller, assets, caller=self.address))
        recipient = self._fee_config.entry_fee_recipient
        if fee > 0:
            self._asset.transfer(recipient, fee, caller=self.address)
            self._emit(EntryFeeCharged(payer=caller, recipient=recipient, fee=fee))
        self._mint(receiver, shares)
        self._emit(Deposit(sender=caller, owner=receiver, assets=assets, shares=shares))
        logger.debug("deposit by %s for %s: assets=%s fee=%s shares=%s", caller, receiver, assets, fee, shares)

    def _exit(self, caller: str, receiver: str, owner: str, assets: int, shares: int):
        if caller != owner:
            allowance = self.allowance(owner, caller)
            if allowance < shares:
                raise Unauthorized(caller, f"share allowance from {owner} is {allowance}, needed {shares}")
            self._spend_allowance(owner, caller, shares)
        self._burn(owner, shares)
        self._asset.transfer(receiver, assets, caller=self.address)
        self._emit(Withdraw(sender=caller, receiver=receiver, owner=owner, assets=assets, shares=shares))
        logger.debug("withdraw by %s from %s to %s: assets=%s shares=%s", caller, owner, receiver, assets, shares)
