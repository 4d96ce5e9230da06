from dataclasses import dataclass

from fee_vault.constants import BPS_DENOMINATOR
from fee_vault.entities.accounts import is_null_account
from fee_vault.errors import InvalidFee, InvalidRecipient, Unauthorized


def validate_entry_fee_basis_points(basis_points) -> int:
    if not isinstance(basis_points, int) or isinstance(basis_points, bool):
        raise InvalidFee(basis_points)
    if basis_points < 0 or basis_points > BPS_DENOMINATOR:
        raise InvalidFee(basis_points)
    return basis_points


def validate_entry_fee_recipient(recipient) -> str:
    if is_null_account(recipient):
        raise InvalidRecipient(recipient)
    return recipient


@dataclass
class FeeConfiguration:
    """
    Entry fee rate and recipient of one vault, changeable only by its admin.
    """
    admin: str
    entry_fee_basis_points: int
    entry_fee_recipient: str

    def __post_init__(self):
        validate_entry_fee_basis_points(self.entry_fee_basis_points)
        validate_entry_fee_recipient(self.entry_fee_recipient)

    def set_entry_fee_basis_points(self, basis_points: int, caller: str) -> int:
        self._only_admin(caller)
        validate_entry_fee_basis_points(basis_points)
        previous = self.entry_fee_basis_points
        self.entry_fee_basis_points = basis_points
        return previous

    def set_entry_fee_recipient(self, recipient: str, caller: str) -> str:
        self._only_admin(caller)
        validate_entry_fee_recipient(recipient)
        previous = self.entry_fee_recipient
        self.entry_fee_recipient = recipient
        return previous

    def _only_admin(self, caller: str):
        if caller != self.admin:
            raise Unauthorized(caller, "only the admin can change the entry fee")
