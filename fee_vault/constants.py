# 10000 basis points == 100%
BPS_DENOMINATOR = 10_000
MAX_UINT256 = 2**256 - 1
ZERO_ADDRESS = "0x" + "00" * 20

DEFAULT_ENTRY_FEE_BASIS_POINTS = 100
DEFAULT_SHARE_NAME = "Vault Share"
DEFAULT_SHARE_SYMBOL = "vSHR"
DEFAULT_DECIMALS = 18
