# Tests for the dynamics evaluator

import pytest
import numpy as np
from roller_racer.core.types import StateIndex, Inertia
from roller_racer.vehicle import observables
from roller_racer.vehicle.dynamics import (
    ConstraintWorkspace,
    DynamicsEvaluator,
    SingularSystemError,
)


class TestEquilibrium:

    def test_zero_state_zero_derivative(self, evaluator, zero_state):
        """At rest with no commands every derivative is exactly zero."""
        deriv = evaluator.evaluate(zero_state, 0.0)

        assert deriv.shape == (11,)
        assert np.all(deriv == 0.0)

    def test_straight_line_is_equilibrium(self, evaluator, zero_state):
        """Rolling straight ahead needs no yaw or steer acceleration."""
        state = zero_state.copy()
        state[StateIndex.X_DOT] = 1.0

        deriv = evaluator.evaluate(state, 0.0)

        assert deriv[StateIndex.PSI_DOT] == 0.0
        assert deriv[StateIndex.DELTA_DOT] == 0.0
        assert deriv[StateIndex.X_DOT] == 0.0
        assert deriv[StateIndex.Z_DOT] == 0.0
        assert deriv[StateIndex.X] == 1.0

    def test_straight_line_wheel_rates(self, evaluator, params, zero_state):
        """Wheels roll at -v / r."""
        state = zero_state.copy()
        state[StateIndex.X_DOT] = 1.0

        deriv = evaluator.evaluate(state, 0.0)

        r_w = params.geometry.r_w
        assert deriv[StateIndex.THETA_L] == pytest.approx(-1.0 / r_w)
        assert deriv[StateIndex.THETA_R] == pytest.approx(-1.0 / r_w)
        assert deriv[StateIndex.THETA_F] == pytest.approx(-1.0 / params.geometry.r_ws)

    def test_straight_line_has_no_contact_force(self, evaluator, zero_state):
        """Pure rolling needs no lateral force."""
        state = zero_state.copy()
        state[StateIndex.X_DOT] = 1.0
        evaluator.evaluate(state, 0.0)

        f_rear, f_front = evaluator.last_contact_forces
        assert f_rear == 0.0
        assert f_front == 0.0


class TestKinematicRows:

    def test_positions_echo_velocities(self, evaluator, moving_state):
        """Position derivatives are the velocity slots."""
        deriv = evaluator.evaluate(moving_state, 0.0)

        assert deriv[StateIndex.X] == moving_state[StateIndex.X_DOT]
        assert deriv[StateIndex.Z] == moving_state[StateIndex.Z_DOT]
        assert deriv[StateIndex.PSI] == moving_state[StateIndex.PSI_DOT]
        assert deriv[StateIndex.DELTA] == moving_state[StateIndex.DELTA_DOT]

    def test_steer_servo_row(self, evaluator, params, moving_state):
        """Steer acceleration follows the PD law, independent of the chassis."""
        params.set_steer_setpoint(0.1)
        deriv = evaluator.evaluate(moving_state, 0.0)

        expected = (
            -params.gains.kd_delta * moving_state[StateIndex.DELTA_DOT]
            - params.gains.kp_delta * (moving_state[StateIndex.DELTA] - 0.1)
        )
        assert deriv[StateIndex.DELTA_DOT] == pytest.approx(expected)

    def test_rear_wheels_differ_by_yaw(self, evaluator, params, zero_state):
        """Yawing in place spins the rear wheels in opposite directions."""
        state = zero_state.copy()
        state[StateIndex.PSI_DOT] = 1.0

        deriv = evaluator.evaluate(state, 0.0)

        c, r_w = params.geometry.c, params.geometry.r_w
        assert deriv[StateIndex.THETA_L] == pytest.approx(c / r_w)
        assert deriv[StateIndex.THETA_R] == pytest.approx(-c / r_w)

    def test_front_wheel_rate(self, evaluator, params, moving_state):
        """Front wheel rate includes the yaw-through-steer term."""
        deriv = evaluator.evaluate(moving_state, 0.0)

        geo = params.geometry
        x_dot = moving_state[StateIndex.X_DOT]
        z_dot = moving_state[StateIndex.Z_DOT]
        psi = moving_state[StateIndex.PSI]
        psi_dot = moving_state[StateIndex.PSI_DOT]
        delta = moving_state[StateIndex.DELTA]
        expected = -(
            x_dot * np.cos(psi + delta) - z_dot * np.sin(psi + delta)
            + geo.h * psi_dot * np.sin(delta)
        ) / geo.r_ws
        assert deriv[StateIndex.THETA_F] == pytest.approx(expected)


class TestConstraintSystem:

    def test_solution_satisfies_system(self, evaluator, moving_state):
        """Returned accelerations and forces solve the assembled system."""
        evaluator.params.set_brake_command(1.0)
        evaluator.evaluate(moving_state, 0.0)

        ws = evaluator.workspace
        assert np.allclose(ws.A @ ws.sol, ws.rhs)

    def test_newton_rows(self, evaluator, params, moving_state):
        """Translational rows balance mass times acceleration against forces."""
        params.set_brake_command(1.0)
        deriv = evaluator.evaluate(moving_state, 0.0)
        f_rear, f_front = evaluator.last_contact_forces

        psi = moving_state[StateIndex.PSI]
        delta = moving_state[StateIndex.DELTA]
        f_brake = observables.brake_force(moving_state, params)
        m = params.inertia.m

        assert m * deriv[StateIndex.X_DOT] == pytest.approx(
            f_brake * np.cos(psi) + f_rear * np.sin(psi) + f_front * np.sin(psi + delta)
        )
        assert m * deriv[StateIndex.Z_DOT] == pytest.approx(
            -f_brake * np.sin(psi) + f_rear * np.cos(psi) + f_front * np.cos(psi + delta)
        )

    def test_slip_rates_match_observables(self, evaluator, params, moving_state):
        """Stabilization terms use the same slip rates as the observables."""
        evaluator.evaluate(moving_state, 0.0)
        rhs = evaluator.workspace.rhs

        x_dot = moving_state[StateIndex.X_DOT]
        z_dot = moving_state[StateIndex.Z_DOT]
        psi = moving_state[StateIndex.PSI]
        psi_dot = moving_state[StateIndex.PSI_DOT]
        kp_slip = params.gains.kp_slip

        expected_rear = (
            -x_dot * psi_dot * np.cos(psi)
            + z_dot * psi_dot * np.sin(psi)
            - kp_slip * observables.slip_rate_rear(moving_state, params)
        )
        assert rhs[3] == pytest.approx(expected_rear, rel=1e-12)

    def test_slip_feedback_drives_slip_to_zero(self, evaluator, params, zero_state):
        """A sliding rear axle is pulled back toward pure rolling."""
        state = zero_state.copy()
        state[StateIndex.Z_DOT] = 0.2  # sideways at psi = 0
        deriv = evaluator.evaluate(state, 0.0)

        # d/dt slipRear for this state, from the rear constraint row
        slip = observables.slip_rate_rear(state, params)
        slip_rate_change = deriv[StateIndex.Z_DOT] + params.geometry.b * deriv[StateIndex.PSI_DOT]
        assert slip > 0.0
        assert slip_rate_change == pytest.approx(-params.gains.kp_slip * slip)

    def test_brake_decelerates_straight_motion(self, evaluator, params, zero_state):
        """Full brake above threshold decelerates at f_max / m."""
        params.set_brake_command(1.0)
        state = zero_state.copy()
        state[StateIndex.X_DOT] = 2.0

        deriv = evaluator.evaluate(state, 0.0)

        assert deriv[StateIndex.X_DOT] == pytest.approx(-params.brake.f_max / params.inertia.m)
        assert deriv[StateIndex.PSI_DOT] == pytest.approx(0.0, abs=1e-12)


class TestEvaluatorContract:

    def test_writes_into_out(self, evaluator, moving_state):
        """Caller-provided output is filled in place and returned."""
        out = np.full(11, np.nan)
        result = evaluator(moving_state, 0.0, out)

        assert result is out
        assert np.all(np.isfinite(out))

    def test_does_not_modify_state(self, evaluator, moving_state):
        """Evaluation is read-only on the state."""
        before = moving_state.copy()
        evaluator.evaluate(moving_state, 0.0)
        assert np.array_equal(moving_state, before)

    def test_repeatable(self, evaluator, moving_state):
        """Same inputs give the same derivative across calls."""
        first = evaluator.evaluate(moving_state, 0.0).copy()
        evaluator.evaluate(np.zeros(11), 0.0)
        second = evaluator.evaluate(moving_state, 1.0)
        assert np.array_equal(first, second)

    def test_marks_begun(self, evaluator, zero_state):
        """First evaluation flips the begun flag."""
        assert not evaluator.begun
        evaluator.evaluate(zero_state, 0.0)
        assert evaluator.begun
        assert evaluator.num_evaluations == 1


class TestSingularSystem:

    def test_workspace_singular(self):
        """A zero matrix cannot be solved."""
        ws = ConstraintWorkspace()
        with pytest.raises(SingularSystemError):
            ws.solve()

    def test_singular_error_is_linalg_error(self):
        """Callers can catch numpy's LinAlgError."""
        assert issubclass(SingularSystemError, np.linalg.LinAlgError)

    def test_evaluator_propagates_and_leaves_out_untouched(self, params, zero_state):
        """Degenerate parameters fail loudly without partial output."""
        # bypass the validated setter to build a massless vehicle
        params.inertia = Inertia(m=0.0, ig=0.0)
        evaluator = DynamicsEvaluator(params)
        out = np.full(11, 7.0)

        with pytest.raises(SingularSystemError):
            evaluator.evaluate(zero_state, 0.0, out)

        assert np.all(out == 7.0)
        assert not evaluator.begun
