"""
Scaling
=======

Conversions between physical units (km, km/s, s) and the dimensionless units
used during integration.

Summary:
--------
With length scale factor lsf [km] and time scale factor tsf [s]:

  position     : r_scaled = r / lsf
  velocity     : v_scaled = v / (lsf / tsf)
  time         : t_scaled = t / tsf
  grav. param. : gp_scaled = gp / (lsf^3 / tsf^2)

The state transition matrix maps scaled initial perturbations to scaled
current perturbations. Its position/velocity cross blocks pick up a factor of
tsf when expressed in physical units:

  [ Phi_rr         Phi_rv * tsf ]
  [ Phi_vr / tsf   Phi_vv       ]

The epoch-sensitivity vector d(state)/d(epoch) picks up lsf/tsf on its
position part and lsf/tsf^2 on its velocity part.

All conversions are exact inverses of each other up to floating-point rounding.
Inputs may be a single vector/matrix or a stacked series: state-like arrays
carry their six components along the first axis, (6,) or (6, N); matrices carry
theirs along the last two axes, (6, 6) or (N, 6, 6).
"""
import numpy as np

from n_body_high_fidelity.errors          import ConfigurationError
from n_body_high_fidelity.model.constants import SCALEFACTORS


class Scaler:
  """
  Scaling manager built from the problem's scale factors.
  """

  def __init__(
    self,
    lsf : float = SCALEFACTORS.LENGTH,
    tsf : float = SCALEFACTORS.TIME,
    msf : float = SCALEFACTORS.MASS,
  ):
    """
    Input:
    ------
      lsf : float
        Length scale factor [km].
      tsf : float
        Time scale factor [s].
      msf : float
        Mass scale factor [kg]. Stored only; the point-mass force model has no
        mass dimension.

    Raises:
    -------
      ConfigurationError
        If any factor is not a finite, strictly positive number (strings are not parsed).
    """
    factors = {}
    for name, value in (('lsf', lsf), ('tsf', tsf), ('msf', msf)):
      # Strings are rejected, including YAML's unquoted 1e5 (read as the string '1e5')
      if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise ConfigurationError(f"Scale factor {name} must be a number, got {value!r}")
      if not np.isfinite(value) or value <= 0.0:
        raise ConfigurationError(f"Scale factor {name} must be a positive finite number, got {value}")
      factors[name] = float(value)

    self.lsf = factors['lsf']
    self.tsf = factors['tsf']
    self.msf = factors['msf']

  @property
  def vsf(self) -> float:
    """Velocity scale factor [km/s]."""
    return self.lsf / self.tsf

  @property
  def asf(self) -> float:
    """Acceleration scale factor [km/s²]."""
    return self.lsf / self.tsf**2

  @property
  def gpsf(self) -> float:
    """Gravitational parameter scale factor [km³/s²]."""
    return self.lsf**3 / self.tsf**2

  def __repr__(self) -> str:
    return f"Scaler(lsf={self.lsf!r}, tsf={self.tsf!r}, msf={self.msf!r})"

  # ---------------------------------------------------------------------------
  # Time and gravitational parameter
  # ---------------------------------------------------------------------------

  def scale_time(self, time):
    return np.asarray(time, dtype=float) / self.tsf

  def unscale_time(self, time_scaled):
    return np.asarray(time_scaled, dtype=float) * self.tsf

  def scale_gp(self, gp: float) -> float:
    return gp / self.gpsf

  def unscale_gp(self, gp_scaled: float) -> float:
    return gp_scaled * self.gpsf

  # ---------------------------------------------------------------------------
  # State
  # ---------------------------------------------------------------------------

  def scale_position(self, pos_vec: np.ndarray) -> np.ndarray:
    return np.asarray(pos_vec, dtype=float) / self.lsf

  def scale_velocity(self, vel_vec: np.ndarray) -> np.ndarray:
    return np.asarray(vel_vec, dtype=float) / self.vsf

  def scale_state(
    self,
    state : np.ndarray,
  ) -> np.ndarray:
    """
    Scale a physical state (or state series) to integration units.

    Input:
    ------
      state : np.ndarray (6,) or (6, N)
        Position [km] and velocity [km/s].

    Output:
    -------
      state_scaled : np.ndarray
        Same shape as the input, dimensionless.
    """
    state_scaled      = np.array(state, dtype=float)
    state_scaled[0:3] = state_scaled[0:3] / self.lsf
    state_scaled[3:6] = state_scaled[3:6] / self.vsf
    return state_scaled

  def unscale_state(
    self,
    state_scaled : np.ndarray,
  ) -> np.ndarray:
    """
    Inverse of scale_state.
    """
    state      = np.array(state_scaled, dtype=float)
    state[0:3] = state[0:3] * self.lsf
    state[3:6] = state[3:6] * self.vsf
    return state

  # ---------------------------------------------------------------------------
  # Variational quantities
  # ---------------------------------------------------------------------------

  def scale_stm(
    self,
    stm : np.ndarray,
  ) -> np.ndarray:
    """
    Scale a physical state transition matrix (or stack) to integration units.

    Input:
    ------
      stm : np.ndarray (6, 6) or (N, 6, 6)

    Output:
    -------
      stm_scaled : np.ndarray
        Same shape as the input.
    """
    stm_scaled = np.array(stm, dtype=float)
    stm_scaled[..., 0:3, 3:6] /= self.tsf
    stm_scaled[..., 3:6, 0:3] *= self.tsf
    return stm_scaled

  def unscale_stm(
    self,
    stm_scaled : np.ndarray,
  ) -> np.ndarray:
    """
    Express a scaled state transition matrix (or stack) in physical units.

    Input:
    ------
      stm_scaled : np.ndarray (6, 6) or (N, 6, 6)

    Output:
    -------
      stm : np.ndarray
        Same shape as the input. Position-velocity block in [s], velocity-position
        block in [1/s], diagonal blocks dimensionless.
    """
    stm = np.array(stm_scaled, dtype=float)
    stm[..., 0:3, 3:6] *= self.tsf
    stm[..., 3:6, 0:3] /= self.tsf
    return stm

  def scale_epoch_sensitivity(
    self,
    sensitivity : np.ndarray,
  ) -> np.ndarray:
    sensitivity_scaled      = np.array(sensitivity, dtype=float)
    sensitivity_scaled[0:3] = sensitivity_scaled[0:3] / self.vsf
    sensitivity_scaled[3:6] = sensitivity_scaled[3:6] / self.asf
    return sensitivity_scaled

  def unscale_epoch_sensitivity(
    self,
    sensitivity_scaled : np.ndarray,
  ) -> np.ndarray:
    """
    Express a scaled epoch-sensitivity vector (or series) in physical units.

    Input:
    ------
      sensitivity_scaled : np.ndarray (6,) or (6, N)

    Output:
    -------
      sensitivity : np.ndarray
        Position part [km/s], velocity part [km/s²].
    """
    sensitivity      = np.array(sensitivity_scaled, dtype=float)
    sensitivity[0:3] = sensitivity[0:3] * self.vsf
    sensitivity[3:6] = sensitivity[3:6] * self.asf
    return sensitivity
