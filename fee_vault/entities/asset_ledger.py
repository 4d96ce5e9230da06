from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class AssetLedger(Protocol):
    """
    The slice of a fungible-token ledger the vault calls into.

    State-changing calls take the calling account explicitly as `caller`.
    """

    def balance_of(self, account: str) -> int:
        ...

    def allowance(self, owner: str, spender: str) -> int:
        ...

    def transfer_from(self, owner: str, to: str, amount: int, *, caller: str) -> bool:
        ...

    def transfer(self, to: str, amount: int, *, caller: str) -> bool:
        ...


@runtime_checkable
class Checkpointable(Protocol):
    """
    A ledger whose whole state can be captured and put back.

    Holding `lock` keeps every other mutation out between `checkpoint` and `restore`.
    """

    @property
    def lock(self) -> Any:
        ...

    def checkpoint(self) -> Any:
        ...

    def restore(self, checkpoint: Any) -> None:
        ...
