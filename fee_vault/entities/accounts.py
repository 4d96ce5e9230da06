import secrets

from fee_vault.constants import ZERO_ADDRESS


def new_address() -> str:
    return "0x" + secrets.token_hex(20)


def is_null_account(account) -> bool:
    return not account or account == ZERO_ADDRESS
