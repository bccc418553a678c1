"""
Problem Configuration
=====================

Immutable description of an N-body initial-value problem and its options.

Usage Example:
--------------
  problem = NBodyProblem(
    initial_state = [1.0e7, 1.0e8, 1.0e6, 15.0, 20.0, 3.0],
    timespan      = (et_o, et_o + 30 * 86400.0),
    bodies        = [10, 399, 301, 299, 499, 599],
    need_stm      = True,
  )
"""
import dataclasses
import operator
import yaml
import numpy as np

from dataclasses import dataclass, field
from pathlib     import Path
from typing      import Union

from n_body_high_fidelity.errors               import ConfigurationError
from n_body_high_fidelity.model.constants      import NAIFIDS, SCALEFACTORS
from n_body_high_fidelity.model.scaling        import Scaler
from n_body_high_fidelity.model.time_converter import epoch_to_et


# Recognized options and their defaults
DEFAULT_OPTIONS = {
  'id_center' : NAIFIDS.SOLAR_SYSTEM_BARYCENTER,
  'ref_frame' : 'ECLIPJ2000',
  'lsf'       : SCALEFACTORS.LENGTH,
  'tsf'       : SCALEFACTORS.TIME,
  'msf'       : SCALEFACTORS.MASS,
  'need_stm'  : False,
}


@dataclass(frozen=True, eq=False)
class NBodyProblem:
  """
  N-body initial-value problem.

  Attributes:
  -----------
    initial_state : np.ndarray (6,)
      Initial position [km] and velocity [km/s] relative to id_center in ref_frame.
    timespan : tuple[float, float]
      Initial and final Ephemeris Time (ET) [s past J2000].
    bodies : tuple[int, ...]
      NAIF IDs of the perturbing bodies. Accelerations are accumulated in this order.
    id_center : int
      NAIF ID of the integration center (default: solar-system barycenter).
    ref_frame : str
      SPICE reference frame (default: 'ECLIPJ2000').
    lsf : float
      Length scale factor [km].
    tsf : float
      Time scale factor [s].
    msf : float
      Mass scale factor [kg], reserved.
    need_stm : bool
      Propagate the state transition matrix and epoch sensitivity.

  Raises:
  -------
    ConfigurationError
      On construction, if any field is invalid.
  """
  initial_state : np.ndarray
  timespan      : tuple
  bodies        : tuple
  id_center     : int   = DEFAULT_OPTIONS['id_center']
  ref_frame     : str   = DEFAULT_OPTIONS['ref_frame']
  lsf           : float = DEFAULT_OPTIONS['lsf']
  tsf           : float = DEFAULT_OPTIONS['tsf']
  msf           : float = DEFAULT_OPTIONS['msf']
  need_stm      : bool  = DEFAULT_OPTIONS['need_stm']
  scaler        : Scaler = field(init=False, repr=False)

  def __post_init__(self):
    # Initial state
    try:
      initial_state = np.array(self.initial_state, dtype=float).ravel()
    except (TypeError, ValueError):
      raise ConfigurationError(f"Initial state must be numeric, got {self.initial_state!r}") from None
    if initial_state.size != 6:
      raise ConfigurationError(f"Initial state must have 6 elements, got {initial_state.size}")
    if not np.all(np.isfinite(initial_state)):
      raise ConfigurationError(f"Initial state must be finite, got {initial_state}")
    initial_state.setflags(write=False)

    # Timespan
    try:
      time_o, time_f = (float(time) for time in self.timespan)
    except (TypeError, ValueError):
      raise ConfigurationError(f"Timespan must be two numbers (initial, final ET), got {self.timespan}") from None
    if not (np.isfinite(time_o) and np.isfinite(time_f)):
      raise ConfigurationError(f"Timespan must be finite, got {self.timespan}")
    if time_o == time_f:
      raise ConfigurationError(f"Timespan must have distinct initial and final times, got {self.timespan}")

    # Bodies and center, integral values only
    try:
      bodies    = tuple(operator.index(body_id) for body_id in self.bodies)
      id_center = operator.index(self.id_center)
    except (TypeError, ValueError):
      raise ConfigurationError(f"Body and center IDs must be integers, got {self.bodies} and {self.id_center!r}") from None
    if len(bodies) == 0:
      raise ConfigurationError("At least one perturbing body is required")
    if len(set(bodies)) != len(bodies):
      raise ConfigurationError(f"Perturbing bodies must be unique, got {list(bodies)}")

    # Options
    if not isinstance(self.ref_frame, str) or not self.ref_frame.strip():
      raise ConfigurationError(f"Reference frame must be a non-empty string, got {self.ref_frame!r}")
    if not isinstance(self.need_stm, (bool, np.bool_)):
      raise ConfigurationError(f"need_stm must be a bool, got {self.need_stm!r}")
    scaler = Scaler(lsf=self.lsf, tsf=self.tsf, msf=self.msf)

    object.__setattr__(self, 'initial_state', initial_state)
    object.__setattr__(self, 'timespan',      (time_o, time_f))
    object.__setattr__(self, 'bodies',        bodies)
    object.__setattr__(self, 'id_center',     id_center)
    object.__setattr__(self, 'ref_frame',     self.ref_frame.strip())
    object.__setattr__(self, 'lsf',           scaler.lsf)
    object.__setattr__(self, 'tsf',           scaler.tsf)
    object.__setattr__(self, 'msf',           scaler.msf)
    object.__setattr__(self, 'need_stm',      bool(self.need_stm))
    object.__setattr__(self, 'scaler',        scaler)

  @property
  def options(self) -> dict:
    """
    The six recognized options as a dict.
    """
    return {name: getattr(self, name) for name in DEFAULT_OPTIONS}

  @property
  def duration(self) -> float:
    return self.timespan[1] - self.timespan[0]

  def with_options(self, **changes) -> 'NBodyProblem':
    """
    Return a validated copy with some fields replaced.
    """
    unknown = set(changes) - {f.name for f in dataclasses.fields(self) if f.init}
    if unknown:
      raise ConfigurationError(f"Unknown problem fields: {sorted(unknown)}")
    return dataclasses.replace(self, **changes)


def _parse_epoch(
  value : Union[str, float, int],
) -> float:
  """
  Epoch string ('2019-01-01T12:00:00 TDB') or ET seconds to ET seconds.
  """
  if isinstance(value, str):
    return epoch_to_et(value)
  return float(value)


def build_problem(
  config : dict,
) -> NBodyProblem:
  """
  Build a problem from a plain dictionary (e.g. parsed YAML).

  Input:
  ------
    config : dict
      Keys:
        initial_state : list of 6 floats [km, km/s]
        bodies        : list of NAIF IDs
        timespan      : [initial, final], epoch strings or ET seconds
          or
        epoch         : epoch string or ET seconds
        duration__s   : propagation duration [s]
        options       : optional dict of id_center, ref_frame, lsf, tsf, msf, need_stm

  Output:
  -------
    problem : NBodyProblem

  Raises:
  -------
    ConfigurationError
      If required keys are missing or unknown keys/options are present.
  """
  known_keys = {'initial_state', 'bodies', 'timespan', 'epoch', 'duration__s', 'options', 'name'}
  unknown    = set(config) - known_keys
  if unknown:
    raise ConfigurationError(f"Unknown problem keys: {sorted(unknown)}")

  for key in ('initial_state', 'bodies'):
    if key not in config:
      raise ConfigurationError(f"Problem is missing required key '{key}'")

  # Timespan
  if 'timespan' in config:
    if 'epoch' in config or 'duration__s' in config:
      raise ConfigurationError("Give either 'timespan' or 'epoch' and 'duration__s', not both")
    timespan = config['timespan']
    if not isinstance(timespan, (list, tuple)) or len(timespan) != 2:
      raise ConfigurationError(f"Timespan must be a list of two epochs, got {timespan}")
    time_o = _parse_epoch(timespan[0])
    time_f = _parse_epoch(timespan[1])
  elif 'epoch' in config and 'duration__s' in config:
    time_o = _parse_epoch(config['epoch'])
    time_f = time_o + float(config['duration__s'])
  else:
    raise ConfigurationError("Problem needs 'timespan' or both 'epoch' and 'duration__s'")

  # Options
  options = config.get('options') or {}
  unknown = set(options) - set(DEFAULT_OPTIONS)
  if unknown:
    raise ConfigurationError(f"Unknown options: {sorted(unknown)}. Recognized: {list(DEFAULT_OPTIONS)}")

  return NBodyProblem(
    initial_state = config['initial_state'],
    timespan      = (time_o, time_f),
    bodies        = config['bodies'],
    **options,
  )


def load_problem(
  filepath : Path,
) -> NBodyProblem:
  """
  Load a problem from a YAML file (see build_problem for the layout).

  Input:
  ------
    filepath : Path
      Path to the YAML problem file.

  Output:
  -------
    problem : NBodyProblem
  """
  filepath = Path(filepath)
  if not filepath.exists():
    raise FileNotFoundError(f"Problem file not found: {filepath}")

  with open(filepath, 'r') as f:
    config = yaml.safe_load(f)

  if not isinstance(config, dict):
    raise ConfigurationError(f"Problem file {filepath} must contain a mapping")

  return build_problem(config)


def print_problem_configuration(
  problem : NBodyProblem,
) -> None:
  """
  Print the problem options in a formatted table.

  Input:
  ------
    problem : NBodyProblem
      Problem to describe.

  Output:
  -------
    None
  """
  entries = [
    (name, getattr(problem, name), default, getattr(problem, name) != default)
    for name, default in DEFAULT_OPTIONS.items()
  ]

  headers = ['Option', 'Value', 'Default', 'User Set']
  rows    = [[str(entry) for entry in row] for row in entries]

  # Column widths: max of header and all values, plus 4 for spacing
  min_spacing = 4
  col_widths  = []
  for col_idx in range(len(headers)):
    max_len = len(headers[col_idx])
    for row in rows:
      max_len = max(max_len, len(row[col_idx]))
    col_widths.append(max_len + min_spacing)

  print("\nProblem Configuration")
  print(f"  Bodies        : {' '.join(str(body_id) for body_id in problem.bodies)}")
  print(f"  Timespan      : {problem.timespan[0]:.6f} ET to {problem.timespan[1]:.6f} ET ({problem.duration} s)")
  print(f"  Initial State : {' '.join(f'{value:.12e}' for value in problem.initial_state)}")
  print("  " + "".join(h.ljust(col_widths[i]) for i, h in enumerate(headers)))
  print("  " + "".join(("-" * (col_widths[i] - min_spacing)).ljust(col_widths[i]) for i in range(len(headers))))
  for row in rows:
    print("  " + "".join(row[col_idx].ljust(col_widths[col_idx]) for col_idx in range(len(row))))
