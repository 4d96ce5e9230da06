from dataclasses import dataclass


@dataclass(frozen=True)
class Transfer:
    sender: str
    receiver: str
    value: int


@dataclass(frozen=True)
class Approval:
    owner: str
    spender: str
    value: int


@dataclass(frozen=True)
class Deposit:
    sender: str
    owner: str
    assets: int
    shares: int


@dataclass(frozen=True)
class Withdraw:
    sender: str
    receiver: str
    owner: str
    assets: int
    shares: int


@dataclass(frozen=True)
class EntryFeeCharged:
    payer: str
    recipient: str
    fee: int


@dataclass(frozen=True)
class EntryFeeBasisPointsUpdated:
    previous: int
    current: int


@dataclass(frozen=True)
class EntryFeeRecipientUpdated:
    previous: str
    current: str
