"""
N-Body Equations of Motion
==========================

Point-mass gravity of several solar-system bodies acting on a massless
spacecraft, with optional variational equations.

Summary:
--------
The propagated state is expressed in scaled units (see model/scaling.py)
relative to a configurable center, in a configurable frame. For every
perturbing body b with scaled gravitational parameter gp_b and scaled position
r_b (relative to the center):

  a = - sum_b gp_b * (r - r_b) / |r - r_b|^3
      - sum_{b != center} gp_b * r_b / |r_b|^3      (only if center != SSB)

The second sum approximates the inertial acceleration of a non-barycentric
center using the perturbing body's position relative to that center.

Variational Equations:
----------------------
With the 48-element augmented state [r, v, Phi (row-major 6x6), s], where Phi
is the state transition matrix and s the epoch-sensitivity vector:

  dfdx    = [[0, I], [dfdr, 0]]
  dPhi/dt = dfdx @ Phi
  ds/dt   = dfdx @ s + [0, dfdt0]

  dfdr  = sum_b G(r - r_b)
  dfdt0 = - sum_b G(r - r_b) @ v_b + sum_{b != center} G(r_b) @ v_b

where G(rho) = gp_b * (-I / |rho|^3 + 3 rho rho^T / |rho|^5) is the gradient of
the point-mass acceleration.

Units:
------
- Input and output in scaled units (position / lsf, velocity / (lsf / tsf),
  time / tsf).
- Ephemeris queries are made at the unscaled time t * tsf [s past J2000].

Notes:
------
- The evaluator keeps no state between calls and returns a new array each
  time, so adaptive integrators may call it at any time, in any order.
- A zero distance to a body is a singularity of the model; the resulting
  inf/nan values are returned as-is.
"""
import numpy as np

from typing import Optional

from n_body_high_fidelity.model.constants      import NAIFIDS
from n_body_high_fidelity.model.ephemeris      import EphemerisProvider
from n_body_high_fidelity.model.body_constants import BodyConstantsProvider


STATE_SIZE       = 6
STM_SIZE         = 36
SENSITIVITY_SIZE = 6
AUGMENTED_SIZE   = STATE_SIZE + STM_SIZE + SENSITIVITY_SIZE

ABERRATION_CORRECTION = 'NONE'


def point_mass_acceleration(
  pos_vec : np.ndarray,
  gp      : float,
) -> np.ndarray:
  """
  Point mass gravity

  Input:
  ------
    pos_vec : np.ndarray (3,)
      Position relative to the attracting body.
    gp : float
      Gravitational parameter of the attracting body.

  Output:
  -------
    acc_vec : np.ndarray (3,)
      Acceleration, in units consistent with the inputs.
  """
  pos_mag = np.linalg.norm(pos_vec)
  return -gp * pos_vec / pos_mag**3


def point_mass_acceleration_jacobian(
  pos_vec : np.ndarray,
  gp      : float,
) -> np.ndarray:
  """
  Gradient of the point mass acceleration with respect to position

  Input:
  ------
    pos_vec : np.ndarray (3,)
      Position relative to the attracting body.
    gp : float
      Gravitational parameter of the attracting body.

  Output:
  -------
    jac_mat : np.ndarray (3, 3)
      d(acc_vec)/d(pos_vec) = gp * (-I / r^3 + 3 r r^T / r^5)
  """
  pos_mag = np.linalg.norm(pos_vec)
  return gp * (-np.eye(3) / pos_mag**3 + 3.0 * np.outer(pos_vec, pos_vec) / pos_mag**5)


class TwoBodyEquationsOfMotion:
  """
  Keplerian equations of motion about a single attracting body at the origin.
  """

  def __init__(
    self,
    gp : float,
  ):
    """
    Input:
    ------
      gp : float
        Gravitational parameter of the central body, in the units of the state.
    """
    self.gp = gp

  def state_time_derivative(
    self,
    time      : float,
    state_vec : np.ndarray,
  ) -> np.ndarray:
    state_dot_vec      = np.empty(STATE_SIZE)
    state_dot_vec[0:3] = state_vec[3:6]
    state_dot_vec[3:6] = point_mass_acceleration(np.asarray(state_vec[0:3], dtype=float), self.gp)
    return state_dot_vec


class NBodyEquationsOfMotion:
  """
  N-body point mass equations of motion in scaled units

  Methods
    state_time_derivative(time, state_vec)
      Right-hand side for the 6-element state or 48-element augmented state
    acceleration(time, pos_vec, with_partials)
      Gravitational acceleration and, optionally, its partial derivatives
  """

  def __init__(
    self,
    problem,
    body_constants : BodyConstantsProvider,
    ephemeris      : EphemerisProvider,
  ):
    """
    Initialize the equations of motion

    Input:
    ------
      problem : NBodyProblem
        Problem configuration (bodies, center, frame, scale factors).
      body_constants : BodyConstantsProvider
        Source of gravitational parameters [km³/s²].
      ephemeris : EphemerisProvider
        Source of body states [km, km/s].

    Output:
    -------
      None
    """
    self.problem        = problem
    self.body_constants = body_constants
    self.ephemeris      = ephemeris
    self.scaler         = problem.scaler

  def _body_state(
    self,
    body_id : int,
    time    : float,
  ) -> tuple[np.ndarray, np.ndarray, float]:
    """
    Scaled position, velocity and gravitational parameter of a body.

    Input:
    ------
      body_id : int
        NAIF ID.
      time : float
        Scaled time.

    Output:
    -------
      pos_body_vec : np.ndarray (3,)
      vel_body_vec : np.ndarray (3,)
      gp_body : float
    """
    pos_vec, vel_vec, _ = self.ephemeris.lookup(
      body_id,
      float(self.scaler.unscale_time(time)),
      self.problem.ref_frame,
      ABERRATION_CORRECTION,
      self.problem.id_center,
    )
    pos_body_vec = self.scaler.scale_position(pos_vec)
    vel_body_vec = self.scaler.scale_velocity(vel_vec)
    gp_body      = self.scaler.scale_gp(self.body_constants.gravitational_parameter(body_id))
    return pos_body_vec, vel_body_vec, gp_body

  def acceleration(
    self,
    time          : float,
    pos_vec       : np.ndarray,
    with_partials : bool = False,
  ) -> tuple[np.ndarray, Optional[np.ndarray], Optional[np.ndarray]]:
    """
    Gravitational acceleration of the spacecraft

    Input:
    ------
      time : float
        Scaled time.
      pos_vec : np.ndarray (3,)
        Scaled spacecraft position relative to the center.
      with_partials : bool
        Also accumulate d(acc)/d(pos) and d(acc)/d(epoch).

    Output:
    -------
      acc_vec : np.ndarray (3,)
        Scaled acceleration.
      dfdr_mat : np.ndarray (3, 3) | None
        d(acc_vec)/d(pos_vec), if with_partials.
      dfdt0_vec : np.ndarray (3,) | None
        d(acc_vec)/d(epoch), if with_partials.
    """
    id_center = self.problem.id_center

    acc_vec   = np.zeros(3)
    dfdr_mat  = np.zeros((3, 3)) if with_partials else None
    dfdt0_vec = np.zeros(3)      if with_partials else None

    for body_id in self.problem.bodies:
      pos_body_vec, vel_body_vec, gp_body = self._body_state(body_id, time)

      # Direct attraction of the body
      pos_rel_vec  = pos_vec - pos_body_vec
      acc_vec     += point_mass_acceleration(pos_rel_vec, gp_body)

      if with_partials:
        jac_mat    = point_mass_acceleration_jacobian(pos_rel_vec, gp_body)
        dfdr_mat  += jac_mat
        dfdt0_vec -= jac_mat @ vel_body_vec

      # Inertial acceleration of a non-barycentric center
      # TODO: take the center's acceleration from its own ephemeris instead of the body's position
      if id_center != NAIFIDS.SOLAR_SYSTEM_BARYCENTER and id_center != body_id:
        acc_vec += point_mass_acceleration(pos_body_vec, gp_body)

        if with_partials:
          dfdt0_vec += point_mass_acceleration_jacobian(pos_body_vec, gp_body) @ vel_body_vec

    return acc_vec, dfdr_mat, dfdt0_vec

  def state_time_derivative(
    self,
    time      : float,
    state_vec : np.ndarray,
  ) -> np.ndarray:
    """
    Compute state time derivative for ODE integration

    Input:
    ------
      time : float
        Scaled time.
      state_vec : np.ndarray (6,) or (48,)
        Scaled state [pos, vel], optionally followed by the row-major state
        transition matrix and the epoch-sensitivity vector.

    Output:
    -------
      state_dot_vec : np.ndarray
        Time derivative, same shape as state_vec.
    """
    state_vec = np.asarray(state_vec, dtype=float)
    if state_vec.size not in (STATE_SIZE, AUGMENTED_SIZE):
      raise ValueError(
        f"State vector must have {STATE_SIZE} or {AUGMENTED_SIZE} elements, got {state_vec.size}"
      )
    with_partials = state_vec.size == AUGMENTED_SIZE

    pos_vec = state_vec[0:3]
    vel_vec = state_vec[3:6]

    acc_vec, dfdr_mat, dfdt0_vec = self.acceleration(time, pos_vec, with_partials)

    state_dot_vec      = np.empty(state_vec.size)
    state_dot_vec[0:3] = vel_vec
    state_dot_vec[3:6] = acc_vec

    if with_partials:
      stm_mat         = state_vec[STATE_SIZE:STATE_SIZE + STM_SIZE].reshape(6, 6)
      sensitivity_vec = state_vec[STATE_SIZE + STM_SIZE:]

      dfdx_mat           = np.zeros((6, 6))
      dfdx_mat[0:3, 3:6] = np.eye(3)
      dfdx_mat[3:6, 0:3] = dfdr_mat

      sensitivity_dot_vec       = dfdx_mat @ sensitivity_vec
      sensitivity_dot_vec[3:6] += dfdt0_vec

      state_dot_vec[STATE_SIZE:STATE_SIZE + STM_SIZE] = (dfdx_mat @ stm_mat).ravel()
      state_dot_vec[STATE_SIZE + STM_SIZE:]           = sensitivity_dot_vec

    return state_dot_vec
