from fractal.core.base.entity import EntityException


class FeeVaultException(EntityException):
    """
    Base exception for the fee vault, its share ledger and the asset token.
    """


class InvalidAmount(FeeVaultException, ValueError):
    """
    Raised when an amount is not an integer in the uint256 range.
    """

    def __init__(self, label: str, value):
        self.label = label
        self.value = value
        super().__init__(f"{label} must be an integer between 0 and 2**256 - 1, got {value!r}")


class InvalidReceiver(FeeVaultException, ValueError):
    """
    Raised when tokens would be minted or transferred to the null account.
    """

    def __init__(self, receiver):
        self.receiver = receiver
        super().__init__(f"Invalid receiver {receiver!r}")


class InsufficientBalance(FeeVaultException):
    def __init__(self, account: str, balance: int, needed: int):
        self.account = account
        self.balance = balance
        self.needed = needed
        super().__init__(f"Balance of {account} is {balance}, needed {needed}")


class InsufficientAllowance(FeeVaultException):
    def __init__(self, owner: str, spender: str, allowance: int, needed: int):
        self.owner = owner
        self.spender = spender
        self.allowance = allowance
        self.needed = needed
        super().__init__(f"Allowance of {spender} over {owner} is {allowance}, needed {needed}")


class ZeroShares(FeeVaultException):
    """
    Raised when an entry would mint no shares.
    """

    def __init__(self, assets: int, reason: str = "deposit converts to zero shares"):
        self.assets = assets
        super().__init__(f"{reason} (assets={assets})")


class ExceedsMaxWithdraw(FeeVaultException):
    def __init__(self, owner: str, assets: int, max_assets: int):
        self.owner = owner
        self.assets = assets
        self.max_assets = max_assets
        super().__init__(f"Withdraw of {assets} assets exceeds the maximum {max_assets} for {owner}")


class ExceedsMaxRedeem(FeeVaultException):
    def __init__(self, owner: str, shares: int, max_shares: int):
        self.owner = owner
        self.shares = shares
        self.max_shares = max_shares
        super().__init__(f"Redeem of {shares} shares exceeds the maximum {max_shares} for {owner}")


class Unauthorized(FeeVaultException):
    def __init__(self, caller: str, reason: str):
        self.caller = caller
        super().__init__(f"{caller} is not authorized: {reason}")


class InvalidFee(FeeVaultException, ValueError):
    def __init__(self, basis_points):
        self.basis_points = basis_points
        super().__init__(f"Entry fee must be between 0 and 10000 basis points, got {basis_points!r}")


class InvalidRecipient(FeeVaultException, ValueError):
    def __init__(self, recipient):
        self.recipient = recipient
        super().__init__(f"Invalid entry fee recipient {recipient!r}")
