import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from fee_vault.constants import DEFAULT_ENTRY_FEE_BASIS_POINTS, DEFAULT_SHARE_NAME, DEFAULT_SHARE_SYMBOL
from fee_vault.entities.fee_config import validate_entry_fee_basis_points, validate_entry_fee_recipient
from fee_vault.errors import InvalidFee, InvalidRecipient

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class VaultConfig(BaseModel):
    name: str = Field(default=DEFAULT_SHARE_NAME, description="Name of the vault share token")
    symbol: str = Field(default=DEFAULT_SHARE_SYMBOL, description="Symbol of the vault share token")
    entry_fee_basis_points: int = Field(
        default=DEFAULT_ENTRY_FEE_BASIS_POINTS,
        strict=True,
        description="Fee charged on every deposit, in basis points of the gross amount (10000 = 100%)"
    )
    entry_fee_recipient: Optional[str] = Field(
        default=None,
        description="Account that receives entry fees at deposit time. Defaults to the vault admin"
    )
    decimals_offset: Optional[int] = Field(
        default=None, ge=0, le=18,
        description="Virtual share offset: 10**offset virtual shares and 1 virtual asset are added to the rate. "
                    "Unset means the plain total_supply / total_assets rate"
    )

    @field_validator("entry_fee_basis_points")
    @classmethod
    def _check_fee(cls, value: int) -> int:
        return validate_entry_fee_basis_points(value)

    @field_validator("entry_fee_recipient")
    @classmethod
    def _check_recipient(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return validate_entry_fee_recipient(value)


def load_vault_config(data: Mapping[str, Any]) -> VaultConfig:
    """
    Validate raw settings into a VaultConfig.

    Fee and recipient problems surface as InvalidFee / InvalidRecipient, the same
    errors the vault's setters raise; anything else stays a pydantic ValidationError.
    """
    try:
        return VaultConfig.model_validate(dict(data))
    except ValidationError as e:
        fields = {error["loc"][0] for error in e.errors() if error["loc"]}
        if "entry_fee_basis_points" in fields:
            raise InvalidFee(data.get("entry_fee_basis_points")) from e
        if "entry_fee_recipient" in fields:
            raise InvalidRecipient(data.get("entry_fee_recipient")) from e
        raise


def configure_logging(level: int | str = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
