import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Tuple

from fee_vault.constants import DEFAULT_DECIMALS, MAX_UINT256, ZERO_ADDRESS
from fee_vault.entities.accounts import is_null_account, new_address
from fee_vault.entities.events import Approval, Transfer
from fee_vault.entities.precision import check_amount
from fee_vault.errors import InsufficientAllowance, InsufficientBalance, InvalidReceiver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenCheckpoint:
    balances: Dict[str, int]
    allowances: Dict[Tuple[str, str], int]
    total_supply: int
    events_count: int


class FungibleToken:
    """
    In-memory ERC-20 style ledger.

    Total supply is kept as its own counter and updated next to every balance
    change, so `sum(balances) == total_supply` is something to check, not an
    identity. An allowance of 2**256 - 1 is treated as infinite.
    """

    def __init__(self, name: str, symbol: str, decimals: int = DEFAULT_DECIMALS, address: str | None = None):
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.address = address or new_address()
        self.events: List[object] = []
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._total_supply: int = 0
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def total_supply(self) -> int:
        with self._lock:
            return self._total_supply

    def balance_of(self, account: str) -> int:
        with self._lock:
            return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        with self._lock:
            return self._allowances.get((owner, spender), 0)

    def holders(self) -> Dict[str, int]:
        with self._lock:
            return {account: balance for account, balance in self._balances.items() if balance > 0}

    def transfer(self, to: str, amount: int, *, caller: str) -> bool:
        with self._lock:
            self._transfer(caller, to, check_amount(amount))
        return True

    def approve(self, spender: str, amount: int, *, caller: str) -> bool:
        with self._lock:
            if is_null_account(spender):
                raise InvalidReceiver(spender)
            self._allowances[(caller, spender)] = check_amount(amount)
            self._emit(Approval(owner=caller, spender=spender, value=amount))
        return True

    def transfer_from(self, owner: str, to: str, amount: int, *, caller: str) -> bool:
        with self._lock:
            check_amount(amount)
            # validate everything before mutating anything
            if is_null_account(to):
                raise InvalidReceiver(to)
            if self.allowance(owner, caller) < amount:
                raise InsufficientAllowance(owner, caller, self.allowance(owner, caller), amount)
            if self.balance_of(owner) < amount:
                raise InsufficientBalance(owner, self.balance_of(owner), amount)
            self._spend_allowance(owner, caller, amount)
            self._transfer(owner, to, amount)
        return True

    def checkpoint(self) -> TokenCheckpoint:
        with self._lock:
            return TokenCheckpoint(
                balances=dict(self._balances),
                allowances=dict(self._allowances),
                total_supply=self._total_supply,
                events_count=len(self.events),
            )

    def restore(self, checkpoint: TokenCheckpoint) -> None:
        with self._lock:
            self._balances = dict(checkpoint.balances)
            self._allowances = dict(checkpoint.allowances)
            self._total_supply = checkpoint.total_supply
            del self.events[checkpoint.events_count:]

    def _emit(self, event) -> None:
        self.events.append(event)

    def _transfer(self, sender: str, to: str, amount: int) -> None:
        if is_null_account(to):
            raise InvalidReceiver(to)
        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(sender, balance, amount)
        self._balances[sender] = balance - amount
        self._balances[to] = self._balances.get(to, 0) + amount
        self._emit(Transfer(sender=sender, receiver=to, value=amount))

    def _mint(self, to: str, amount: int) -> None:
        if is_null_account(to):
            raise InvalidReceiver(to)
        check_amount(self._total_supply + amount, "total supply")
        self._balances[to] = self._balances.get(to, 0) + amount
        self._total_supply += amount
        self._emit(Transfer(sender=ZERO_ADDRESS, receiver=to, value=amount))

    def _burn(self, account: str, amount: int) -> None:
        balance = self._balances.get(account, 0)
        if balance < amount:
            raise InsufficientBalance(account, balance, amount)
        self._balances[account] = balance - amount
        self._total_supply -= amount
        self._emit(Transfer(sender=account, receiver=ZERO_ADDRESS, value=amount))

    def _spend_allowance(self, owner: str, spender: str, amount: int) -> None:
        current = self._allowances.get((owner, spender), 0)
        if current == MAX_UINT256:
            return
        if current < amount:
            raise InsufficientAllowance(owner, spender, current, amount)
        self._allowances[(owner, spender)] = current - amount
