POSITION_NAME = 'depositor'
ASSET_DECIMALS = 18
