from dataclasses import dataclass
from typing import List

import numpy as np

from ..errors import ConfigurationError


@dataclass(frozen=True)
class AttachmentRecord:
    """Terminal index, its small-cell index and the anchor index"""
    terminal: int
    small_cell: int
    anchor: int = 0


class AttachmentPolicy:
    """
    Uniform random attachment

    Each terminal, in increasing index order, gets one small cell drawn
    uniformly from [0, N) and is bound to it together with the anchor cell.
    Signal strength and distance are not considered and no small cell has a
    capacity limit. Records are fixed for the whole run.

    Parameters
    ----------
    rng : numpy.random.Generator
        Injected random source; one draw per terminal
    radio : RadioEngine, optional
        Collaborator performing the binding in ``attach_all``
    logger : SimulationLogger, optional
    """

    def __init__(self, rng: np.random.Generator, radio=None, logger=None):
        self.rng = rng
        self.radio = radio
        self.logger = logger

    def decide(self, n_terminals: int, n_small_cells: int) -> List[AttachmentRecord]:
        if n_terminals < 0:
            raise ConfigurationError(f'number of terminals must be non-negative, got {n_terminals}')
        if n_terminals > 0 and n_small_cells <= 0:
            raise ConfigurationError(
                f'{n_terminals} terminals need a small cell to attach to, but there are {n_small_cells}')
        return [AttachmentRecord(t, int(self.rng.integers(0, n_small_cells)))
                for t in range(n_terminals)]

    def attach_all(self, terminal_devices, small_cell_devices, anchor_device) -> List[AttachmentRecord]:
        """Decide and apply attachment for every terminal

        Parameters
        ----------
        terminal_devices : list of TerminalDevice
            In increasing index order
        small_cell_devices : list of CellDevice
        anchor_device : CellDevice

        Returns
        -------
        list of AttachmentRecord
            One per terminal
        """
        if self.radio is None:
            raise ConfigurationError('attach_all needs a radio engine')
        records = self.decide(len(terminal_devices), len(small_cell_devices))
        for record, device in zip(records, terminal_devices):
            self.radio.attach(device, small_cell_devices[record.small_cell], anchor_device)
        if self.logger is not None:
            counts = np.bincount(np.array([r.small_cell for r in records], dtype=int),
                                 minlength=len(small_cell_devices))
            self.logger.info(f'Attached {len(records)} terminals; per small cell: {counts.tolist()}')
        return records
