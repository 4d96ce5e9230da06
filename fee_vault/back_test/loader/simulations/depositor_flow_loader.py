import random
from pathlib import Path
import numpy as np
import pandas as pd
from fractal.loaders.base_loader import Loader
from datetime import datetime

class DepositorFlowLoader(Loader):
    """
    Simulated flows of a single vault depositor.

    Every interval between `start_time` and `end_time` gets one row with
    - deposits_withdrawals: a deposit (> 0), nothing (0) or a withdrawal (< 0), drawn
      uniformly up to the given limits, in whole tokens
    - inflows: assets that reach the vault outside deposit/mint, the positive half of a
      normal draw with `inflow_std_deviation`, in whole tokens

    Draws come from a private `random.Random(seed)`, so the same seed always gives the
    same frame. `run()` stores the frame under the depositor flows dump file;
    `read()` loads it back unless asked to simulate again.
    """

    def __init__(
        self,
        deposit_simulation_limit: float,
        withdraw_simulation_limit: float,
        inflow_std_deviation: float,
        start_time: datetime,
        end_time: datetime,
        seed: int = 420,
        interval: str = 'd',
        precision: int = 6
    ) -> None:
        super().__init__()
        self._data = None
        self.deposit_simulation_limit = deposit_simulation_limit
        self.withdraw_simulation_limit = withdraw_simulation_limit
        self.inflow_std_deviation = inflow_std_deviation
        self.start_time = start_time
        self.end_time = end_time
        self.interval = interval
        self.precision = precision
        self._file_id = "depositor_simulated_flows"
        self._random = random.Random(seed)

    @property
    def dump_path(self) -> Path:
        return Path(self.file_path(self._file_id))

    def extract(self):
        timestamps = pd.date_range(start=self.start_time, end=self.end_time, freq=self.interval, name='timestamp')
        self._data = pd.DataFrame(index=timestamps)

    def _draw_flow(self) -> float:
        side = self._random.randint(0, 2)
        if side == 1:
            return 0.0
        limit = self.deposit_simulation_limit if side == 0 else self.withdraw_simulation_limit
        amount = round(self._random.uniform(0, limit), self.precision)
        return amount if side == 0 else -amount

    def _draw_inflow(self) -> float:
        # only positive draws reach the vault
        inflow = self._random.normalvariate(0, self.inflow_std_deviation)
        return round(inflow, self.precision) if inflow > 0 else 0.0

    def transform(self):
        rows = len(self._data)
        flows = np.empty(rows)
        inflows = np.empty(rows)
        for i in range(rows):
            flows[i] = self._draw_flow()
            inflows[i] = self._draw_inflow()
        self._data['deposits_withdrawals'] = flows
        self._data['inflows'] = inflows

    def load(self):
        self._load(self._file_id)

    def read(self, with_run: bool = False) -> pd.DataFrame:
        if with_run:
            self.run()
        else:
            self._read(self._file_id)
        return self._data

    def delete_dump_file(self):
        self.dump_path.unlink(missing_ok=True)
