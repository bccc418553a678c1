"""
Unit Tests for Dynamics Module
==============================

Tests for the N-body equations of motion and their variational equations.

Tests:
------
TestPointMass
  - test_known_solution_acceleration       : inverse-square magnitude, pointing at the body
  - test_jacobian_matches_finite_difference : analytic gradient against central differences
  - test_jacobian_trace_is_zero            : the point-mass gradient is traceless

TestNBodyEquationsOfMotion
  - test_state_derivative_layout           : velocity feeds position rate, acceleration feeds velocity rate
  - test_matches_two_body_reduction        : one body at the center gives Keplerian dynamics
  - test_body_order_and_queries            : one lookup per body, in configured order, at unscaled time
  - test_purity_out_of_order_calls         : repeated calls give identical, freshly owned results
  - test_augmented_state_at_identity       : STM rate equals dfdx and sensitivity rate equals [0, dfdt0]
  - test_dfdt0_matches_epoch_difference    : epoch partial against central differences in time
  - test_indirect_term_non_barycentric     : non-barycentric center adds the indirect acceleration
  - test_invalid_state_size                : only 6 or 48 element states are accepted
  - test_unknown_body                      : missing gravitational parameter propagates
  - test_zero_distance_is_not_finite       : singular geometry returns non-finite values

Usage:
------
  python -m pytest n_body_high_fidelity/validation/test_dynamics.py -v
"""
import pytest
import numpy as np

from n_body_high_fidelity.errors               import UnknownBodyError
from n_body_high_fidelity.input.configuration  import NBodyProblem
from n_body_high_fidelity.model.body_constants import BodyConstants
from n_body_high_fidelity.model.constants      import NAIFIDS
from n_body_high_fidelity.model.dynamics       import (
  AUGMENTED_SIZE,
  NBodyEquationsOfMotion,
  TwoBodyEquationsOfMotion,
  point_mass_acceleration,
  point_mass_acceleration_jacobian,
)


class TestPointMass:
  """
  Tests for the point-mass gravity helpers.
  """

  def test_known_solution_acceleration(self):
    gp      = 398600.4418
    pos_vec = np.array([7000.0, 0.0, 0.0])

    acc_vec = point_mass_acceleration(pos_vec, gp)

    assert acc_vec[0] == pytest.approx(-gp / 7000.0**2, rel=1e-14)
    assert acc_vec[1] == 0.0
    assert acc_vec[2] == 0.0

  def test_jacobian_matches_finite_difference(self):
    gp      = 1.5
    pos_vec = np.array([0.8, -0.3, 0.45])
    delta   = 1.0e-6

    jac_mat = point_mass_acceleration_jacobian(pos_vec, gp)

    jac_fd_mat = np.zeros((3, 3))
    for idx in range(3):
      step_vec            = np.zeros(3)
      step_vec[idx]       = delta
      acc_plus_vec        = point_mass_acceleration(pos_vec + step_vec, gp)
      acc_minus_vec       = point_mass_acceleration(pos_vec - step_vec, gp)
      jac_fd_mat[:, idx]  = (acc_plus_vec - acc_minus_vec) / (2.0 * delta)

    assert np.allclose(jac_mat, jac_fd_mat, rtol=1e-7, atol=1e-9)
    assert np.allclose(jac_mat, jac_mat.T)

  def test_jacobian_trace_is_zero(self):
    jac_mat = point_mass_acceleration_jacobian(np.array([3.0, 4.0, 12.0]), 2.0)
    assert np.trace(jac_mat) == pytest.approx(0.0, abs=1e-15)


class TestNBodyEquationsOfMotion:
  """
  Tests for NBodyEquationsOfMotion with analytic ephemerides.
  """

  def test_state_derivative_layout(self, cislunar_problem, earth_moon_constants, earth_moon_ephemeris):
    eom       = NBodyEquationsOfMotion(cislunar_problem, earth_moon_constants, earth_moon_ephemeris)
    time      = cislunar_problem.scaler.scale_time(cislunar_problem.timespan[0])
    state_vec = cislunar_problem.scaler.scale_state(cislunar_problem.initial_state)

    state_dot_vec   = eom.state_time_derivative(time, state_vec)
    acc_vec, _, _   = eom.acceleration(time, state_vec[0:3])

    assert state_dot_vec.shape == (6,)
    assert np.array_equal(state_dot_vec[0:3], state_vec[3:6])
    assert np.array_equal(state_dot_vec[3:6], acc_vec)

  def test_matches_two_body_reduction(self, static_earth_ephemeris, earth_moon_constants):
    """
    With the Earth as the only body and as the center, the N-body model
    reduces to Keplerian motion.
    """
    problem = NBodyProblem(
      initial_state = [7000.0, 100.0, -50.0, 0.1, 7.5, 1.0],
      timespan      = (0.0, 3600.0),
      bodies        = [NAIFIDS.EARTH],
      id_center     = NAIFIDS.EARTH,
      lsf           = 6378.1366,
      tsf           = 806.8,
    )
    scaler    = problem.scaler
    eom       = NBodyEquationsOfMotion(problem, earth_moon_constants, static_earth_ephemeris)
    kepler    = TwoBodyEquationsOfMotion(scaler.scale_gp(earth_moon_constants.gravitational_parameter(NAIFIDS.EARTH)))
    state_vec = scaler.scale_state(problem.initial_state)

    assert np.allclose(
      eom.state_time_derivative(0.5, state_vec),
      kepler.state_time_derivative(0.5, state_vec),
      rtol=1e-14,
    )

  def test_body_order_and_queries(self, cislunar_problem, earth_moon_constants, earth_moon_ephemeris):
    eom  = NBodyEquationsOfMotion(cislunar_problem, earth_moon_constants, earth_moon_ephemeris)
    time = 6000.123

    eom.state_time_derivative(time, cislunar_problem.scaler.scale_state(cislunar_problem.initial_state))

    calls = earth_moon_ephemeris.calls
    assert [call[0] for call in calls] == [NAIFIDS.EARTH, NAIFIDS.MOON]
    for _, time_et, frame, aberration_correction, center_id in calls:
      assert time_et               == pytest.approx(time * cislunar_problem.tsf)
      assert frame                 == 'ECLIPJ2000'
      assert aberration_correction == 'NONE'
      assert center_id             == NAIFIDS.SOLAR_SYSTEM_BARYCENTER

  def test_purity_out_of_order_calls(self, cislunar_problem, earth_moon_constants, earth_moon_ephemeris):
    """
    Adaptive integrators evaluate at arbitrary times in arbitrary order.
    """
    eom       = NBodyEquationsOfMotion(cislunar_problem.with_options(need_stm=True), earth_moon_constants, earth_moon_ephemeris)
    state_vec = np.concatenate([cislunar_problem.scaler.scale_state(cislunar_problem.initial_state), np.eye(6).ravel(), np.zeros(6)])
    state_copy_vec = state_vec.copy()

    first_dot_vec  = eom.state_time_derivative(6000.0, state_vec)
    eom.state_time_derivative(6003.0, state_vec)
    eom.state_time_derivative(5990.0, 2.0 * state_vec)
    second_dot_vec = eom.state_time_derivative(6000.0, state_vec)

    assert np.array_equal(first_dot_vec, second_dot_vec)
    assert first_dot_vec is not second_dot_vec
    assert not np.shares_memory(first_dot_vec, state_vec)
    assert np.array_equal(state_vec, state_copy_vec)

  def test_augmented_state_at_identity(self, cislunar_problem, earth_moon_constants, earth_moon_ephemeris):
    eom       = NBodyEquationsOfMotion(cislunar_problem, earth_moon_constants, earth_moon_ephemeris)
    time      = 6000.0
    pos_vel   = cislunar_problem.scaler.scale_state(cislunar_problem.initial_state)
    state_vec = np.concatenate([pos_vel, np.eye(6).ravel(), np.zeros(6)])

    state_dot_vec                = eom.state_time_derivative(time, state_vec)
    acc_vec, dfdr_mat, dfdt0_vec = eom.acceleration(time, pos_vel[0:3], with_partials=True)

    dfdx_mat           = np.zeros((6, 6))
    dfdx_mat[0:3, 3:6] = np.eye(3)
    dfdx_mat[3:6, 0:3] = dfdr_mat

    assert state_dot_vec.shape == (AUGMENTED_SIZE,)
    assert np.allclose(state_dot_vec[0:6],  eom.state_time_derivative(time, pos_vel), rtol=1e-15)
    assert np.allclose(state_dot_vec[6:42], dfdx_mat.ravel(), rtol=1e-15)
    assert np.allclose(state_dot_vec[42:45], 0.0)
    assert np.allclose(state_dot_vec[45:48], dfdt0_vec, rtol=1e-15)

  @pytest.mark.parametrize("id_center", [NAIFIDS.SOLAR_SYSTEM_BARYCENTER, NAIFIDS.EARTH])
  def test_dfdt0_matches_epoch_difference(self, id_center, cislunar_problem, earth_moon_constants, earth_moon_ephemeris):
    """
    Shifting the epoch moves the bodies under a fixed spacecraft position, so
    d(acc)/d(epoch) is the time derivative of the acceleration at fixed position.
    """
    problem = cislunar_problem.with_options(id_center=id_center)
    eom     = NBodyEquationsOfMotion(problem, earth_moon_constants, earth_moon_ephemeris)
    time    = 6000.0
    pos_vec = problem.scaler.scale_position(problem.initial_state[0:3])
    delta   = 1.0e-3

    _, _, dfdt0_vec = eom.acceleration(time, pos_vec, with_partials=True)
    acc_plus_vec, _, _  = eom.acceleration(time + delta, pos_vec)
    acc_minus_vec, _, _ = eom.acceleration(time - delta, pos_vec)
    dfdt0_fd_vec = (acc_plus_vec - acc_minus_vec) / (2.0 * delta)

    assert np.allclose(dfdt0_vec, dfdt0_fd_vec, rtol=1e-6, atol=1e-9 * np.linalg.norm(dfdt0_fd_vec))

  def test_indirect_term_non_barycentric(self, earth_moon_constants, earth_moon_ephemeris):
    """
    About the Earth, the Moon contributes its direct attraction plus the
    indirect term -gp_moon * r_moon / |r_moon|^3 (approximating the Earth's
    own acceleration toward the Moon).
    """
    problem = NBodyProblem(
      initial_state = [50000.0, 0.0, 0.0, 0.0, 2.8, 0.0],
      timespan      = (0.0, 86400.0),
      bodies        = [NAIFIDS.EARTH, NAIFIDS.MOON],
      id_center     = NAIFIDS.EARTH,
      lsf           = 1.0,
      tsf           = 1.0,
    )
    eom     = NBodyEquationsOfMotion(problem, earth_moon_constants, earth_moon_ephemeris)
    time    = 1000.0
    pos_vec = problem.initial_state[0:3]

    pos_moon_vec, _, _ = earth_moon_ephemeris.lookup(NAIFIDS.MOON, time, 'ECLIPJ2000', 'NONE', NAIFIDS.EARTH)
    gp_earth = earth_moon_constants.gravitational_parameter(NAIFIDS.EARTH)
    gp_moon  = earth_moon_constants.gravitational_parameter(NAIFIDS.MOON)

    acc_expected_vec = (
      point_mass_acceleration(pos_vec, gp_earth)
      + point_mass_acceleration(pos_vec - pos_moon_vec, gp_moon)
      + point_mass_acceleration(pos_moon_vec, gp_moon)
    )

    acc_vec, _, _ = eom.acceleration(time, pos_vec)
    assert np.allclose(acc_vec, acc_expected_vec, rtol=1e-13)

  @pytest.mark.parametrize("size", [3, 7, 42, 49])
  def test_invalid_state_size(self, size, cislunar_problem, earth_moon_constants, earth_moon_ephemeris):
    eom = NBodyEquationsOfMotion(cislunar_problem, earth_moon_constants, earth_moon_ephemeris)
    with pytest.raises(ValueError):
      eom.state_time_derivative(6000.0, np.ones(size))

  def test_unknown_body(self, cislunar_problem, earth_moon_ephemeris):
    body_constants = BodyConstants(gp={NAIFIDS.EARTH: 398600.4418})
    eom            = NBodyEquationsOfMotion(cislunar_problem, body_constants, earth_moon_ephemeris)

    with pytest.raises(UnknownBodyError) as excinfo:
      eom.state_time_derivative(6000.0, cislunar_problem.scaler.scale_state(cislunar_problem.initial_state))
    assert excinfo.value.body_id == NAIFIDS.MOON

  def test_zero_distance_is_not_finite(self, static_earth_ephemeris, earth_moon_constants):
    problem = NBodyProblem(
      initial_state = [0.0, 0.0, 0.0, 1.0, 0.0, 0.0],
      timespan      = (0.0, 1.0),
      bodies        = [NAIFIDS.EARTH],
    )
    eom = NBodyEquationsOfMotion(problem, earth_moon_constants, static_earth_ephemeris)

    with np.errstate(divide='ignore', invalid='ignore'):
      state_dot_vec = eom.state_time_derivative(0.0, np.array([0.0, 0.0, 0.0, 1.0, 0.0, 0.0]))

    assert not np.all(np.isfinite(state_dot_vec[3:6]))
