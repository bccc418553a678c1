"""
N-Body Propagator
=================

Numerical integration of the N-body equations of motion, with optional state
transition matrix and epoch sensitivity.

Pipeline:
---------
  1. Scale   : initial state and timespan to integration units; append the
               identity STM and zero epoch sensitivity if requested.
  2. Integrate : scipy.integrate.solve_ivp on NBodyEquationsOfMotion.
  3. Unscale : states, STMs and sensitivities back to km, km/s, s.
"""
import numpy as np

from pathlib         import Path
from typing          import Optional
from scipy.integrate import solve_ivp

from n_body_high_fidelity.errors               import IntegrationFailure
from n_body_high_fidelity.input.configuration  import NBodyProblem, print_problem_configuration
from n_body_high_fidelity.model.body_constants import BodyConstants, BodyConstantsProvider
from n_body_high_fidelity.model.dynamics       import NBodyEquationsOfMotion, STATE_SIZE, STM_SIZE
from n_body_high_fidelity.model.ephemeris      import EphemerisProvider, SpiceEphemeris
from n_body_high_fidelity.utility.logger       import start_logging, stop_logging
from n_body_high_fidelity.utility.printer      import print_results_summary


DEFAULT_METHOD = 'DOP853'
DEFAULT_RTOL   = 1.0e-10
DEFAULT_ATOL   = 1.0e-10


def build_initial_state(
  problem : NBodyProblem,
) -> np.ndarray:
  """
  Scaled initial state, augmented with the identity STM and a zero epoch
  sensitivity when the problem asks for them.

  Input:
  ------
    problem : NBodyProblem

  Output:
  -------
    state_o : np.ndarray (6,) or (48,)
  """
  state_o = problem.scaler.scale_state(problem.initial_state)
  if not problem.need_stm:
    return state_o

  return np.concatenate([
    state_o,
    np.eye(6).ravel(),
    np.zeros(6),
  ])


def propagate_n_body(
  problem        : NBodyProblem,
  body_constants : BodyConstantsProvider,
  ephemeris      : Optional[EphemerisProvider] = None,
  method         : str                         = DEFAULT_METHOD,
  rtol           : float                       = DEFAULT_RTOL,
  atol           : float                       = DEFAULT_ATOL,
  t_eval         : Optional[np.ndarray]        = None,
  num_points     : Optional[int]               = None,
) -> dict:
  """
  Propagate an N-body problem.

  Input:
  ------
    problem : NBodyProblem
      Initial-value problem and options.
    body_constants : BodyConstantsProvider
      Gravitational parameters [km³/s²].
    ephemeris : EphemerisProvider, optional
      Body states [km, km/s]. Defaults to SPICE (kernels must be loaded).
    method : str
      Integration method for scipy.solve_ivp (default: 'DOP853').
    rtol : float
      Relative tolerance, in scaled units.
    atol : float
      Absolute tolerance, in scaled units.
    t_eval : np.ndarray, optional
      Ephemeris Times [s] at which to store the solution. Default: the
      integrator's own steps.
    num_points : int, optional
      Store the solution on this many equally spaced times (dense output).
      Cannot be combined with t_eval.

  Output:
  -------
    result : dict
      Dictionary containing:
      - success     : bool - Integration success flag (always True on return)
      - message     : str - Integrator status message
      - time        : np.ndarray (N,) - Ephemeris Time [s]
      - state       : np.ndarray (6, N) - State history [km, km/s]
      - state_f     : np.ndarray (6,) - Final state
      - nfev        : int - Number of right-hand side evaluations
      - stm         : np.ndarray (N, 6, 6) - State transition matrices (if need_stm)
      - sensitivity : np.ndarray (6, N) - Epoch sensitivities (if need_stm)

  Raises:
  -------
    IntegrationFailure
      If the integrator stops before the final time.
    UnknownBodyError, EphemerisLookupError
      Propagated unchanged from the providers.
  """
  if t_eval is not None and num_points is not None:
    raise ValueError("Cannot provide both t_eval and num_points.")

  if ephemeris is None:
    ephemeris = SpiceEphemeris()

  scaler = problem.scaler
  eom    = NBodyEquationsOfMotion(problem, body_constants, ephemeris)

  # Scale
  state_o   = build_initial_state(problem)
  time_span = (float(scaler.scale_time(problem.timespan[0])), float(scaler.scale_time(problem.timespan[1])))
  t_eval_scaled = None if t_eval is None else scaler.scale_time(t_eval)

  # Integrate
  solution = solve_ivp(
    fun          = eom.state_time_derivative,
    t_span       = time_span,
    y0           = state_o,
    method       = method,
    rtol         = rtol,
    atol         = atol,
    t_eval       = t_eval_scaled,
    dense_output = num_points is not None,
  )

  if not solution.success:
    time_last  = float(scaler.unscale_time(solution.t[-1]))     if solution.t.size > 0 else None
    state_last = scaler.unscale_state(solution.y[0:STATE_SIZE, -1]) if solution.t.size > 0 else None
    raise IntegrationFailure(
      f"Integration failed: {solution.message}",
      time  = time_last,
      state = state_last,
    )

  time_scaled  = solution.t
  state_scaled = solution.y
  if num_points is not None:
    time_scaled  = np.linspace(time_span[0], time_span[1], num_points)
    state_scaled = solution.sol(time_scaled)

  # Unscale
  state = scaler.unscale_state(state_scaled[0:STATE_SIZE])
  result = {
    'success' : True,
    'message' : solution.message,
    'time'    : scaler.unscale_time(time_scaled),
    'state'   : state,
    'state_f' : state[:, -1],
    'nfev'    : solution.nfev,
  }

  if problem.need_stm:
    stm_scaled         = state_scaled[STATE_SIZE:STATE_SIZE + STM_SIZE].T.reshape(-1, 6, 6)
    sensitivity_scaled = state_scaled[STATE_SIZE + STM_SIZE:]
    result['stm']         = scaler.unscale_stm(stm_scaled)
    result['sensitivity'] = scaler.unscale_epoch_sensitivity(sensitivity_scaled)

  return result


def propagate(
  problem        : NBodyProblem,
  body_constants : BodyConstantsProvider,
  ephemeris      : Optional[EphemerisProvider] = None,
  **kwargs,
):
  """
  Propagate an N-body problem and return only the trajectories.

  Input:
  ------
    problem : NBodyProblem
    body_constants : BodyConstantsProvider
    ephemeris : EphemerisProvider, optional
    **kwargs
      Integrator options forwarded to propagate_n_body (rtol, atol, ...).

  Output:
  -------
    state : np.ndarray (6, N)
      If need_stm is False.
    (state, stm, sensitivity) : tuple
      If need_stm is True; shapes (6, N), (N, 6, 6), (6, N).
  """
  result = propagate_n_body(problem, body_constants, ephemeris, **kwargs)
  if problem.need_stm:
    return result['state'], result['stm'], result['sensitivity']
  return result['state']


def run_n_body_propagation(
  problem        : NBodyProblem,
  body_constants : Optional[BodyConstantsProvider] = None,
  ephemeris      : Optional[EphemerisProvider]     = None,
  log_filepath   : Optional[Path]                  = None,
  **kwargs,
) -> dict:
  """
  Configure, run and report an N-body propagation on the console.

  Input:
  ------
    problem : NBodyProblem
      Initial-value problem and options.
    body_constants : BodyConstantsProvider, optional
      Defaults to BodyConstants.from_spice() (kernels must be loaded).
    ephemeris : EphemerisProvider, optional
      Defaults to SpiceEphemeris() (kernels must be loaded).
    log_filepath : Path, optional
      Also write the console output to this file.
    **kwargs
      Integrator options forwarded to propagate_n_body.

  Output:
  -------
    result : dict
      See propagate_n_body.
  """
  logger_context = start_logging(log_filepath) if log_filepath is not None else None
  try:
    print("\nN-Body Model")

    if body_constants is None:
      body_constants = BodyConstants.from_spice()
    if ephemeris is None:
      ephemeris = SpiceEphemeris()

    print_problem_configuration(problem)

    method = kwargs.get('method', DEFAULT_METHOD)
    rtol   = kwargs.get('rtol',   DEFAULT_RTOL)
    atol   = kwargs.get('atol',   DEFAULT_ATOL)
    print("\n  Numerical Integration")
    print(f"    Method     : {method}")
    print(f"    Tolerances : rtol={rtol:g}, atol={atol:g}")
    print(f"    STM        : {'Yes' if problem.need_stm else 'No'}")

    print("\n  Compute")
    print("    Numerical Integration Running ... ", end='', flush=True)
    try:
      result = propagate_n_body(problem, body_constants, ephemeris, **kwargs)
    except Exception:
      print("Failed")
      raise
    print("Complete")

    print_results_summary(result, problem)
  finally:
    stop_logging(logger_context)

  return result
