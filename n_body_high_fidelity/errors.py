"""
Error Types
===========

Typed failures raised by the N-body propagator. Each error also derives from
the built-in exception callers would naturally catch for that failure.
"""
from typing import Optional

import numpy as np


class NBodyError(Exception):
  """
  Base class for all propagator errors.
  """


class ConfigurationError(NBodyError, ValueError):
  """
  Invalid problem configuration (bad option value, empty body list, ...).
  """


class UnknownBodyError(NBodyError, KeyError):
  """
  The body constants provider has no gravitational parameter for a body id.
  """
  def __init__(
    self,
    body_id  : int,
    quantity : str = 'gravitational parameter',
  ):
    self.body_id  = body_id
    self.quantity = quantity
    super().__init__(body_id)

  def __str__(self) -> str:
    return f"No {self.quantity} known for body id {self.body_id}"


class EphemerisLookupError(NBodyError, RuntimeError):
  """
  The ephemeris provider could not return a state (coverage gap, unknown
  frame or body).
  """


class KernelsNotLoadedError(NBodyError, RuntimeError):
  """
  A SPICE-backed provider was used before the kernels were loaded.
  """


class IntegrationFailure(NBodyError, RuntimeError):
  """
  The numerical integrator could not meet the requested tolerances.

  Attributes:
  -----------
    time : float | None
      Last successfully integrated time [s].
    state : np.ndarray | None
      Last successfully integrated state [km, km/s].
  """
  def __init__(
    self,
    message : str,
    time    : Optional[float]      = None,
    state   : Optional[np.ndarray] = None,
  ):
    super().__init__(message)
    self.time  = time
    self.state = state
