"""
Ephemeris Provider
==================

Positions and velocities of perturbing bodies for the equations of motion.

The equations of motion only depend on the `EphemerisProvider` protocol, so
any object with a matching `lookup` method can stand in for SPICE (for example
an analytic ephemeris in tests).
"""
import numpy    as np
import spiceypy as spice

from typing                    import Protocol
from spiceypy.utils.exceptions import SpiceyError

from n_body_high_fidelity.errors import EphemerisLookupError, KernelsNotLoadedError


class EphemerisProvider(Protocol):
  def lookup(
    self,
    body_id               : int,
    time                  : float,
    frame                 : str,
    aberration_correction : str,
    center_id             : int,
  ) -> tuple[np.ndarray, np.ndarray, float]:
    ...


def spice_kernels_loaded() -> bool:
  """
  Return True if at least one SPICE kernel is furnished.
  """
  return spice.ktotal('ALL') > 0


class SpiceEphemeris:
  """
  Ephemeris provider backed by SPICE `spkez`.

  Kernels must already be loaded (see
  `n_body_high_fidelity.input.loader.load_spice_kernels`); construction fails
  otherwise so that a missing setup is reported before any integration starts.
  """

  def __init__(self):
    if not spice_kernels_loaded():
      raise KernelsNotLoadedError(
        "No SPICE kernels are loaded. Call load_spice_kernels() before building an ephemeris provider."
      )

  def lookup(
    self,
    body_id               : int,
    time                  : float,
    frame                 : str,
    aberration_correction : str,
    center_id             : int,
  ) -> tuple[np.ndarray, np.ndarray, float]:
    """
    State of a body relative to a center at a given ephemeris time.

    Input:
    ------
      body_id : int
        NAIF ID of the target body.
      time : float
        Ephemeris Time (ET) in seconds past J2000.
      frame : str
        Reference frame (e.g. 'ECLIPJ2000', 'J2000').
      aberration_correction : str
        SPICE aberration correction flag (e.g. 'NONE').
      center_id : int
        NAIF ID of the observing center.

    Output:
    -------
      pos_vec : np.ndarray (3,)
        Position [km].
      vel_vec : np.ndarray (3,)
        Velocity [km/s].
      light_time : float
        One-way light time [s].

    Raises:
    -------
      EphemerisLookupError
        If SPICE cannot provide the state.
    """
    try:
      state, light_time = spice.spkez(
        targ   = int(body_id),
        et     = float(time),
        ref    = frame,
        abcorr = aberration_correction,
        obs    = int(center_id),
      )
    except SpiceyError as exc:
      raise EphemerisLookupError(
        f"Ephemeris lookup failed for body {body_id} relative to {center_id} in {frame} at ET {time}: {exc}"
      ) from exc

    state = np.array(state, dtype=float)
    return state[0:3], state[3:6], float(light_time)
