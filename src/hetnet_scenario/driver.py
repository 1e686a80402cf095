"""
Scenario driver: builds the heterogeneous deployment and runs it
"""

import os
from datetime import datetime
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from .components.addressing import AddressingService
from .components.attachment import AttachmentPolicy
from .components.cell import AnchorCell, SmallCell
from .components.mobility import MobilityConfigurator, MobilityEngine
from .components.radio import RadioEngine
from .components.scenario import ScenarioConfig
from .components.topology import TopologyBuilder
from .errors import ConfigurationError
from .simulator import Simulator
from .utils.helpers import calculate_distance
from .utils.logger import SimulationLogger


class ScenarioDriver:
    """Orchestrates scenario construction and the simulation run

    Setup is a strictly sequential, single-pass pipeline:

    1. validate the configuration
    2. build the grid topology
    3. create small cells, the anchor cell and terminals
    4. configure mobility (cells static, terminals random walk)
    5. install small-cell, anchor and terminal devices
    6. install the IP stack on terminals and assign their addresses
    7. attach every terminal to a random small cell and the anchor

    The shared random generator is consumed in that order, so the same seed
    and parameters always give the same deployment. If any step fails the
    engine is torn down and the original exception propagates.

    Parameters
    ----------
    config : ScenarioConfig, optional
        Scenario parameters; defaults to the reference deployment
    rng : numpy.random.Generator, optional
        Random source; defaults to ``np.random.default_rng(config.seed)``
    logger : SimulationLogger, optional
        Defaults to a logger built from ``config.logging``
    sim, radio, addressing, mobility : optional
        Collaborators; created on setup when not given
    """

    def __init__(self, config: Optional[ScenarioConfig] = None,
                 rng: Optional[np.random.Generator] = None,
                 logger: Optional[SimulationLogger] = None,
                 sim=None, radio=None, addressing=None, mobility=None):
        self.config = config or ScenarioConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        if logger is None:
            try:
                logger = SimulationLogger.from_config('hetnet_scenario', self.config.logging)
            except ValueError as e:
                raise ConfigurationError(str(e)) from e
        self.logger = logger

        self.sim = sim
        self.radio = radio
        self.addressing = addressing
        self.mobility = mobility

        self.cell_positions = None
        self.small_cells = []
        self.anchor_cells = []
        self.terminals = []
        self.small_cell_devices = []
        self.anchor_devices = []
        self.terminal_devices = []
        self.initial_positions: List[np.ndarray] = []
        self.final_positions: List[np.ndarray] = []
        self.address_bindings = []
        self.attachments = []
        self.is_setup = False
        self.finished = False

    def _make_collaborators(self) -> None:
        if self.sim is None:
            self.sim = Simulator(self.logger)
        if self.radio is None:
            self.radio = RadioEngine(self.sim, self.config.radio, self.logger)
        if self.addressing is None:
            self.addressing = AddressingService(self.sim, self.config.radio.terminal_network, self.logger)
        if self.mobility is None:
            self.mobility = MobilityEngine(self.sim, self.rng, self.config.mobility.step_distance)

    def setup(self) -> None:
        """Build the whole scenario; nothing is simulated yet"""
        if self.is_setup:
            return
        cfg = self.config
        try:
            cfg.validate()
        except ConfigurationError as e:
            self.logger.error(f'Invalid scenario configuration: {e}')
            raise
        self.logger.info(f'Setting up scenario {cfg.name}: {cfg.get_summary()}')
        try:
            self._make_collaborators()
            topology = TopologyBuilder(cfg.area.max_x, cfg.area.max_y, cfg.grid)
            self.cell_positions = topology.build(cfg.n_small_cells)
            overlapping = topology.overlaps_anchor(cfg.n_small_cells)
            if len(overlapping):
                self.logger.warning(f'Small cell(s) {overlapping.tolist()} share the anchor position')
            self.logger.info(f'Topology: anchor at {self.cell_positions[0]}, '
                             f'{cfg.n_small_cells} small cells on a {cfg.grid.row_width}-wide grid')

            self.small_cells = self.radio.create_cells(cfg.n_small_cells, SmallCell)
            self.anchor_cells = self.radio.create_cells(1, AnchorCell)
            self.terminals = self.radio.create_terminals(cfg.n_terminals)

            configurator = MobilityConfigurator(self.mobility, cfg.area.rectangle(), cfg.mobility, self.rng)
            configurator.configure_cells(self.anchor_cells + self.small_cells, self.cell_positions)
            self.initial_positions = configurator.configure_terminals(self.terminals)
            self.logger.info(f'Mobility: {len(self.terminals)} terminals, {cfg.mobility.model.value} '
                             f'at {cfg.mobility.min_speed}-{cfg.mobility.max_speed} m/s')
            self.logger.log_deployment(self.anchor_cells + self.small_cells, self.terminals)

            self.small_cell_devices = self.radio.install_small_cell_devices(self.small_cells)
            self.anchor_devices = self.radio.install_anchor_cell_device(self.anchor_cells)
            self.terminal_devices = self.radio.install_terminal_devices(self.terminals)

            self.addressing.install_internet_stack(self.terminals)
            self.address_bindings = self.addressing.assign_addresses(self.terminal_devices)

            policy = AttachmentPolicy(self.rng, self.radio, self.logger)
            self.attachments = policy.attach_all(self.terminal_devices,
                                                 self.small_cell_devices,
                                                 self.anchor_devices[0])
        except Exception as e:
            self.logger.error(f'Scenario setup failed: {e}')
            if self.sim is not None:
                self.sim.stop_and_teardown()
            raise
        self.is_setup = True

    def run(self) -> List:
        """Set up if needed, run for the configured duration, then tear down

        Returns
        -------
        list of AttachmentRecord
        """
        self.setup()
        start_time = datetime.now()
        self.logger.info('Starting simulation')
        try:
            self.sim.run_for(self.config.duration)
            self.final_positions = [self.mobility.get_position(t) for t in self.terminals]
        finally:
            self.sim.stop_and_teardown()
            self.finished = True
            duration = (datetime.now() - start_time).total_seconds()
            self.logger.info(f'Simulation completed in {duration:.2f} seconds')
        return self.attachments

    def get_summary(self) -> Dict:
        summary = self.config.get_summary()
        summary.update({
            'n_cell_positions': 0 if self.cell_positions is None else len(self.cell_positions),
            'n_attachments': len(self.attachments),
            'n_addresses': len(self.address_bindings),
            'finished': self.finished,
        })
        return summary

    def layout_frames(self) -> Dict[str, pd.DataFrame]:
        """Cells, terminals and attachments as data frames"""
        if not self.is_setup:
            raise RuntimeError('scenario has not been set up')
        cells = self.anchor_cells + self.small_cells
        counts = [len(self.attachments)]  # every terminal also uses the anchor
        counts += [sum(1 for r in self.attachments if r.small_cell == k) for k in range(len(self.small_cells))]
        cells_df = pd.DataFrame({
            'node': [c.i for c in cells],
            'kind': [c.kind for c in cells],
            'index': [0] + list(range(len(self.small_cells))),
            'x': self.cell_positions[:, 0],
            'y': self.cell_positions[:, 1],
            'z': self.cell_positions[:, 2],
            'n_terminals': counts,
        })

        initial = np.array(self.initial_positions).reshape(-1, 3)
        terminals_df = pd.DataFrame({
            'node': [t.i for t in self.terminals],
            'index': list(range(len(self.terminals))),
            'x0': initial[:, 0],
            'y0': initial[:, 1],
            'z0': initial[:, 2],
            'address': [str(b.address) for b in self.address_bindings],
        })
        if self.final_positions:
            final = np.array(self.final_positions).reshape(-1, 3)
            terminals_df['x'] = final[:, 0]
            terminals_df['y'] = final[:, 1]
            terminals_df['z'] = final[:, 2]

        attachments_df = pd.DataFrame({
            'terminal': [r.terminal for r in self.attachments],
            'small_cell': [r.small_cell for r in self.attachments],
            'anchor': [r.anchor for r in self.attachments],
            'initial_distance_m': [
                calculate_distance(self.initial_positions[r.terminal], self.cell_positions[r.small_cell + 1])
                for r in self.attachments
            ],
        })
        return {'cells': cells_df, 'terminals': terminals_df, 'attachments': attachments_df}

    def save_layout(self, output_dir: str) -> Dict[str, str]:
        """Write cells.csv, terminals.csv and attachments.csv

        Parameters
        ----------
        output_dir : str
            Output directory

        Returns
        -------
        dict
            Table name to file path
        """
        os.makedirs(output_dir, exist_ok=True)
        paths = {}
        for name, df in self.layout_frames().items():
            paths[name] = os.path.join(output_dir, f'{name}.csv')
            df.to_csv(paths[name], index=False)
        self.logger.info(f'Layout written to {output_dir}')
        return paths

    def plot_layout(self, output_dir: str) -> str:
        """Draw cells, terminals and attachment lines

        Parameters
        ----------
        output_dir : str
            Output directory

        Returns
        -------
        str
            Path of the saved figure
        """
        os.makedirs(output_dir, exist_ok=True)
        frames = self.layout_frames()
        cells, terminals = frames['cells'], frames['terminals']

        fig, ax = plt.subplots(figsize=(8, 8))
        for r in self.attachments:
            t = self.initial_positions[r.terminal]
            c = self.cell_positions[r.small_cell + 1]
            ax.plot([t[0], c[0]], [t[1], c[1]], color='lightgray', linewidth=0.5, zorder=1)
        ax.scatter(terminals['x0'], terminals['y0'], s=10, label='Terminal', zorder=2)
        small = cells[cells['kind'] == SmallCell.kind]
        ax.scatter(small['x'], small['y'], marker='^', s=60, label='Small cell', zorder=3)
        anchor = cells[cells['kind'] == AnchorCell.kind]
        ax.scatter(anchor['x'], anchor['y'], marker='*', s=200, label='Anchor cell', zorder=4)
        ax.set_xlim(0, self.config.area.max_x)
        ax.set_ylim(0, self.config.area.max_y)
        ax.set_title(f'Scenario {self.config.name}')
        ax.set_xlabel('x (m)')
        ax.set_ylabel('y (m)')
        ax.legend()

        path = os.path.join(output_dir, 'layout.png')
        fig.tight_layout()
        fig.savefig(path)
        plt.close(fig)
        return path
