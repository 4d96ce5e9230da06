from fractal.core.base import Observation
from datetime import datetime
from typing import List
import pandas as pd
from fee_vault.back_test.constants import ASSET_DECIMALS, POSITION_NAME
from fee_vault.back_test.entities.vault_position import FeeVaultGlobalState
from fee_vault.back_test.loader.simulations.depositor_flow_loader import DepositorFlowLoader
from fee_vault.back_test.units import to_base_units

def observations_from_flows(flows_df: pd.DataFrame, decimals: int = ASSET_DECIMALS) -> List[Observation]:
    """
    Turn simulated flows into observations of the depositor position.

    Amounts in the frame are whole tokens; states carry base units.
    """
    observations: List[Observation] = []
    # set timestamp as index if it is not set
    if 'timestamp' in flows_df.columns:
        flows_df = flows_df.set_index('timestamp')
    flows_df = flows_df.sort_index()

    for timestamp, row in flows_df.iterrows():
        flow = float(row['deposits_withdrawals'])
        state = FeeVaultGlobalState(
            deposits=to_base_units(flow, decimals) if flow > 0 else 0,
            withdrawals=to_base_units(-flow, decimals) if flow < 0 else 0,
            inflow=to_base_units(float(row['inflows']), decimals),
        )
        # Convert timestamp to datetime if it is string
        if isinstance(timestamp, str):
            timestamp = pd.to_datetime(timestamp)
        observations.append(Observation(timestamp=timestamp, states={POSITION_NAME: state}))

    return observations

def build_observations(start_time: datetime, end_time: datetime, with_run: bool = True) -> List[Observation]:
    """
    Build observations list from simulated depositor flows, one per day.

    Returns:
        List[Observation]: List of observations containing the depositor flow for each day
    """
    flows_df = DepositorFlowLoader(
        deposit_simulation_limit=10_000,
        withdraw_simulation_limit=10_000,
        inflow_std_deviation=50,
        start_time=start_time,
        end_time=end_time,
    ).read(with_run=with_run)
    return observations_from_flows(flows_df)
