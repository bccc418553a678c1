"""
Pytest Configuration and Fixtures
=================================

Shared fixtures for all validation tests.

Most tests run against an analytic Earth-Moon ephemeris so that no SPICE
kernels are needed. Tests that do need kernels request `spice_kernels`, which
skips when the kernel files are not available.
"""
import pytest
import numpy as np

from pathlib import Path

from n_body_high_fidelity.errors               import EphemerisLookupError
from n_body_high_fidelity.input.configuration  import NBodyProblem
from n_body_high_fidelity.input.loader         import get_spice_kernels_folderpath, load_spice_kernels, unload_spice_kernels
from n_body_high_fidelity.model.body_constants import BodyConstants
from n_body_high_fidelity.model.constants      import NAIFIDS
from n_body_high_fidelity.model.ephemeris      import spice_kernels_loaded


# Earth-Moon system used by the analytic ephemeris
GP_EARTH        = 398600.435436  # [km³/s²]
GP_MOON         = 4902.800066    # [km³/s²]
EARTH_MOON_DIST = 384400.0       # [km]

# Epoch of the analytic tests, 2019-01-01T12:00:00 TDB [s past J2000]
ET_O = 599616000.0


class CircularEphemeris:
  """
  Analytic ephemeris of bodies on circular, coplanar orbits about the
  barycenter (NAIF ID 0).

  Each body is described by (radius [km], angular rate [rad/s], phase [rad])
  at time zero. Lookups relative to another center subtract that center's
  state. The frame and aberration correction arguments are accepted and
  ignored.
  """

  def __init__(self, orbits: dict):
    self.orbits = orbits
    self.calls  = []

  def _barycentric_state(self, body_id, time):
    if body_id == NAIFIDS.SOLAR_SYSTEM_BARYCENTER:
      return np.zeros(3), np.zeros(3)
    if body_id not in self.orbits:
      raise EphemerisLookupError(f"No analytic orbit for body {body_id}")

    radius, rate, phase = self.orbits[body_id]
    angle   = rate * time + phase
    pos_vec = radius * np.array([ np.cos(angle), np.sin(angle), 0.0])
    vel_vec = radius * rate * np.array([-np.sin(angle), np.cos(angle), 0.0])
    return pos_vec, vel_vec

  def lookup(self, body_id, time, frame, aberration_correction, center_id):
    self.calls.append((body_id, time, frame, aberration_correction, center_id))
    pos_body_vec,   vel_body_vec   = self._barycentric_state(body_id,   time)
    pos_center_vec, vel_center_vec = self._barycentric_state(center_id, time)
    return pos_body_vec - pos_center_vec, vel_body_vec - vel_center_vec, 0.0


@pytest.fixture
def earth_moon_ephemeris():
  """Earth and Moon on circular orbits about their barycenter."""
  rate       = np.sqrt((GP_EARTH + GP_MOON) / EARTH_MOON_DIST**3)
  mass_ratio = GP_MOON / (GP_EARTH + GP_MOON)
  return CircularEphemeris({
    NAIFIDS.EARTH : (mass_ratio         * EARTH_MOON_DIST, rate, np.pi),
    NAIFIDS.MOON  : ((1.0 - mass_ratio) * EARTH_MOON_DIST, rate, 0.0  ),
  })


@pytest.fixture
def static_earth_ephemeris():
  """Earth fixed at the barycenter."""
  return CircularEphemeris({NAIFIDS.EARTH: (0.0, 0.0, 0.0)})


@pytest.fixture
def earth_moon_constants():
  """Gravitational parameters of the Earth and Moon."""
  return BodyConstants(
    gp     = {NAIFIDS.EARTH: GP_EARTH, NAIFIDS.MOON: GP_MOON},
    radius = {NAIFIDS.EARTH: 6378.1366, NAIFIDS.MOON: 1737.4},
    name   = {NAIFIDS.EARTH: 'EARTH', NAIFIDS.MOON: 'MOON'},
  )


@pytest.fixture
def cislunar_problem():
  """High Earth orbit perturbed by the Moon, integrated about the barycenter."""
  return NBodyProblem(
    initial_state = [200000.0, 0.0, 5000.0, 0.0, 1.35, 0.1],
    timespan      = (ET_O, ET_O + 5 * 86400.0),
    bodies        = [NAIFIDS.EARTH, NAIFIDS.MOON],
    lsf           = 1.0e5,
    tsf           = 1.0e5,
  )


@pytest.fixture
def empty_kernel_pool():
  """Skip when another test module left kernels loaded."""
  if spice_kernels_loaded():
    pytest.skip("SPICE kernel pool is not empty")


@pytest.fixture(scope="module")
def spice_kernels():
  """
  Load the default kernel set for one test module and unload it afterwards.
  Skips when the kernel files are not available.
  """
  try:
    kernel_filepaths = load_spice_kernels()
  except FileNotFoundError as exc:
    pytest.skip(f"SPICE kernels not available in {get_spice_kernels_folderpath()}: {exc}")

  yield kernel_filepaths

  unload_spice_kernels()


@pytest.fixture(scope="session")
def project_root():
  """Return the project root directory."""
  return Path(__file__).parent.parent.parent
