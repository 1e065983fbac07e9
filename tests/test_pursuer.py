"""Unit tests for the pursuer behavior machine.

The open_grid fixture is a 9x9 room; with cell_size 4 the floor spans
world coordinates 4..28 on both axes.
"""

import random

import pytest

from entities.pursuer import Pursuer, pursuer_speed, base_speed
from game.game_state import BossType, GameState
from utils.constants import FALAH_SHOUT, SAIF_SHOUT, CAPTURE_LINE

FAR = (4.0, 4.0)


@pytest.fixture
def lines():
    return []


@pytest.fixture
def pursuer(config, lines):
    """Pursuer in the middle of the room, world (20, 20)."""
    return Pursuer(5, 5, config, random.Random(3), lambda text, boss: lines.append(text))


class TestSpeed:
    """Speed scaling by boss, level and rage."""

    def test_base_speeds(self, config):
        assert base_speed(BossType.FALAH, config) == 4.2
        assert base_speed(BossType.SAIF, config) == 5.5

    def test_falah_level_one(self, config):
        assert pursuer_speed(BossType.FALAH, 1, 1.0, config) == pytest.approx(4.2 * 1.7)

    def test_saif_scaled_by_level_and_rage(self, config):
        assert pursuer_speed(BossType.SAIF, 2, 1.5, config) == pytest.approx(5.5 * 2.4 * 1.5)


class TestChase:
    """Path following and the direct-line fallback."""

    def test_first_frame_plans_and_moves_closer(self, pursuer, open_grid, session):
        before = pursuer.distance_to(*FAR)

        events = pursuer.update(0.1, open_grid, FAR, session)

        assert events['repathed'] is True
        assert pursuer.path[0] == (20.0, 20.0)
        assert pursuer.path[-1] == FAR
        assert pursuer.distance_to(*FAR) < before
        assert pursuer.is_moving

    def test_repath_cadence(self, pursuer, open_grid, session):
        """Plans on the first frame, then once the interval is exceeded."""
        repaths = []
        for frame in range(6):
            if pursuer.update(0.125, open_grid, FAR, session)['repathed']:
                repaths.append(frame)
        assert repaths == [0, 5]

    def test_step_never_overshoots_waypoint(self, pursuer, open_grid, session):
        pursuer.update(1.0, open_grid, FAR, session)
        x, z = pursuer.x, pursuer.z
        assert (x, z) in ((16.0, 20.0), (20.0, 16.0))

    def test_direct_line_when_sharing_a_cell(self, pursuer, open_grid, session):
        """Same cell means no path, so it walks straight at the player."""
        pursuer.update(0.01, open_grid, (21.8, 20.0), session)

        assert pursuer.path == []
        assert pursuer.x > 20.0
        assert pursuer.z == 20.0

    def test_direct_line_rejects_walls(self, config, open_grid, session):
        pursuer = Pursuer(1, 1, config, random.Random(3))

        pursuer.update(0.5, open_grid, (1.0, 4.0), session)

        assert (pursuer.x, pursuer.z) == (4.0, 4.0)

    def test_speed_reads_session(self, pursuer, session):
        session.state.rage_multiplier = 2.0
        assert pursuer.speed(session) == pytest.approx(4.2 * 1.7 * 2.0)


class TestCapture:
    """Catching the player."""

    def test_capture_starts_struggle(self, pursuer, open_grid, session, lines):
        events = pursuer.update(0.01, open_grid, (21.0, 20.0), session)

        assert events['captured'] is True
        assert session.state.phase == GameState.STRUGGLE
        assert lines[-1] == CAPTURE_LINE

    def test_holds_still_during_struggle(self, pursuer, open_grid, session):
        pursuer.update(0.01, open_grid, (21.0, 20.0), session)
        x, z = pursuer.x, pursuer.z

        events = pursuer.update(0.1, open_grid, FAR, session)

        assert events['captured'] is False
        assert (pursuer.x, pursuer.z) == (x, z)


class TestInertStates:
    """Stunned and transforming pursuers do nothing."""

    def test_stunned(self, pursuer, open_grid, session):
        session.state.stunned_until = session.now + 1000

        events = pursuer.update(0.1, open_grid, (21.0, 20.0), session)

        assert events['captured'] is False
        assert session.state.phase == GameState.PLAYING
        assert (pursuer.x, pursuer.z) == (20.0, 20.0)

    def test_transforming_collapses(self, pursuer, open_grid, session):
        session.state.active_boss = BossType.TRANSFORMING

        events = pursuer.update(0.1, open_grid, (21.0, 20.0), session)

        assert events['captured'] is False
        assert pursuer.tilt < 0
        assert pursuer.height < 1.0
        assert (pursuer.x, pursuer.z) == (20.0, 20.0)

    def test_stands_up_when_active_again(self, pursuer, open_grid, session):
        session.state.active_boss = BossType.TRANSFORMING
        pursuer.update(0.1, open_grid, FAR, session)
        session.state.active_boss = BossType.SAIF

        pursuer.update(0.1, open_grid, FAR, session)

        assert pursuer.tilt == 0.0
        assert pursuer.height == 1.0


class TestNarration:
    """Shouts while close to the player."""

    def test_falah_shouts(self, pursuer, open_grid, session, lines):
        pursuer.shout_timer = 0.05

        events = pursuer.update(0.1, open_grid, (10.0, 20.0), session)

        assert events['shout'] == FALAH_SHOUT
        assert lines == [FALAH_SHOUT]
        assert 5.0 <= pursuer.shout_timer <= 13.0

    def test_saif_shouts(self, pursuer, open_grid, session, lines):
        session.state.active_boss = BossType.SAIF
        pursuer.shout_timer = 0.05

        pursuer.update(0.1, open_grid, (10.0, 20.0), session)

        assert lines == [SAIF_SHOUT]

    def test_quiet_when_far(self, pursuer, open_grid, session, lines):
        pursuer.shout_timer = 0.05
        pursuer.update(0.1, open_grid, FAR, session)
        assert lines == []


class TestState:
    """Reset and snapshot."""

    def test_reset(self, pursuer, open_grid, session):
        pursuer.update(0.5, open_grid, FAR, session)
        pursuer.reset()

        assert (pursuer.x, pursuer.z) == (20.0, 20.0)
        assert pursuer.path == []
        assert pursuer.cell == (5, 5)

    def test_snapshot(self, pursuer):
        snap = pursuer.snapshot()
        assert snap['x'] == 20.0
        assert snap['cell'] == (5, 5)
        assert snap['moving'] is False
