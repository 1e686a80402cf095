import numpy as np


class Node:
  '''
  A participant of the simulation with a 3-D position. Identities are
  handed out by the radio engine when nodes are created and are never
  reused.

  Parameters
  ----------
  i : int
    Global node identity.
  xyz : [float, float, float]
    Position in metres; the mobility engine sets it.
  '''
  kind = 'node'

  def __init__(self, i, xyz=None):
    self.i = i
    self.xyz = np.zeros(3) if xyz is None else np.array(xyz, dtype=float)

  def __repr__(self):
    return f'{type(self).__name__}(i={self.i},xyz={self.xyz})'


class AnchorCell(Node):
  ''' The single wide-area macro base station. '''
  kind = 'anchor'


class SmallCell(Node):
  ''' A short-range, high-frequency base station on the grid. '''
  kind = 'small_cell'


class CellDevice:
  '''
  Radio device installed on a base station.

  Parameters
  ----------
  node : Node
    The base station carrying this device.
  index : int
    Position of the device within its DeviceSet; small-cell attachment
    records refer to this index.
  bandwidth_Hz : float
    Channel bandwidth.
  fc_Hz : float
    Centre frequency.
  '''

  def __init__(self, node, index, bandwidth_Hz, fc_Hz):
    self.node = node
    self.index = index
    self.bandwidth_Hz = bandwidth_Hz
    self.fc_Hz = fc_Hz
    self.attached = set()  # terminal indices

  @property
  def kind(self):
    return self.node.kind

  def get_nattached(self):
    return len(self.attached)

  def __repr__(self):
    return f'CellDevice(kind={self.kind},index={self.index},node={self.node.i},attached={sorted(self.attached)})'
