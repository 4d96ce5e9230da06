from fee_vault.constants import DEFAULT_DECIMALS
from fee_vault.entities.fungible_token import FungibleToken
from fee_vault.entities.precision import check_amount
from fee_vault.errors import Unauthorized

# 1,000,000 whole tokens minted to the deployer
INITIAL_SUPPLY = 1_000_000 * 10**DEFAULT_DECIMALS


class VaultToken(FungibleToken):
    """
    The base asset deposited into the vault: a plain ERC-20 whose owner can mint.
    """

    def __init__(
        self,
        owner: str,
        name: str = "VaultToken",
        symbol: str = "VTK",
        decimals: int = DEFAULT_DECIMALS,
        initial_supply: int = INITIAL_SUPPLY,
        address: str | None = None,
    ):
        super().__init__(name, symbol, decimals, address)
        self._owner = owner
        if initial_supply:
            self._mint(owner, check_amount(initial_supply, "initial supply"))

    @property
    def owner(self) -> str:
        return self._owner

    def mint(self, to: str, amount: int, *, caller: str) -> bool:
        with self._lock:
            if caller != self._owner:
                raise Unauthorized(caller, f"only {self._owner} can mint {self.symbol}")
            self._mint(to, check_amount(amount))
        return True
