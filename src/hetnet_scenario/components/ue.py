from .cell import Node


class Terminal(Node):
  ''' A mobile user device. '''
  kind = 'terminal'


class TerminalDevice:
  '''
  Radio device installed on a terminal. Serving cells are fixed once by
  the attachment step; there is no handover.

  Parameters
  ----------
  node : Terminal
    The terminal carrying this device.
  index : int
    Terminal index within its DeviceSet.
  '''

  def __init__(self, node, index):
    self.node = node
    self.index = index
    self.small_cell = None
    self.anchor_cell = None
    self.address = None

  @property
  def kind(self):
    return self.node.kind

  def is_attached(self):
    return self.small_cell is not None

  def get_serving_cell_i(self):
    '''
    Return the small-cell index serving this terminal, or ``None``.
    '''
    if self.small_cell is None: return None
    return self.small_cell.index

  def __repr__(self):
    return f'TerminalDevice(index={self.index},node={self.node.i},small_cell={self.get_serving_cell_i()})'
