"""
Exception hierarchy for scenario construction
"""


class HetNetError(Exception):
    """Base class for all scenario errors"""


class ConfigurationError(HetNetError, ValueError):
    """Invalid scenario parameters, detected before any simulation time advances"""


class CollaboratorFailure(HetNetError, RuntimeError):
    """
    A radio, addressing, mobility or simulation engine call failed.

    The scenario driver never retries these; they propagate unchanged.
    """
