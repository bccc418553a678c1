"""
N-Body High-Fidelity Propagator
===============================

Point-mass N-body trajectory propagation with SPICE ephemerides, scaled
integration units, and optional state transition matrix and epoch sensitivity.

Usage Example:
--------------
  from n_body_high_fidelity import (
    BodyConstants, NBodyProblem, SpiceEphemeris, epoch_to_et, load_spice_kernels, propagate,
  )

  load_spice_kernels()

  et_o    = epoch_to_et('2019-01-01T12:00:00 TDB')
  problem = NBodyProblem(
    initial_state = [1.0e8, 0.0, 0.0, 0.0, 35.0, 0.0],
    timespan      = (et_o, et_o + 30 * 86400.0),
    bodies        = [10, 399, 301, 299, 499, 599],
    need_stm      = True,
  )
  state, stm, sensitivity = propagate(problem, BodyConstants.from_spice(), SpiceEphemeris())
"""
from .errors import (
  NBodyError,
  ConfigurationError,
  UnknownBodyError,
  EphemerisLookupError,
  KernelsNotLoadedError,
  IntegrationFailure,
)
from .model.body_constants     import BodyConstants
from .model.dynamics           import NBodyEquationsOfMotion, TwoBodyEquationsOfMotion
from .model.ephemeris          import SpiceEphemeris
from .model.scaling            import Scaler
from .model.time_converter     import epoch_to_et, et_to_utc, utc_to_et
from .input.configuration      import NBodyProblem, build_problem, load_problem
from .input.loader             import load_spice_kernels, unload_spice_kernels
from .propagation.propagator   import propagate, propagate_n_body, run_n_body_propagation

__all__ = [
  # Errors
  'NBodyError',
  'ConfigurationError',
  'UnknownBodyError',
  'EphemerisLookupError',
  'KernelsNotLoadedError',
  'IntegrationFailure',
  # Model
  'BodyConstants',
  'NBodyEquationsOfMotion',
  'TwoBodyEquationsOfMotion',
  'SpiceEphemeris',
  'Scaler',
  'epoch_to_et',
  'et_to_utc',
  'utc_to_et',
  # Input
  'NBodyProblem',
  'build_problem',
  'load_problem',
  'load_spice_kernels',
  'unload_spice_kernels',
  # Propagation
  'propagate',
  'propagate_n_body',
  'run_n_body_propagation',
]
