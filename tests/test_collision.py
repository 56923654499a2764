"""Tests for antrails.physics.collision — AABB tests and damped response."""

import math

import pytest

from antrails.physics.collision import (
    Box,
    Collision,
    CollisionResolver,
    broad_phase_rejects,
    collide,
    damp_direction,
)
from antrails.world.arena import Arena


class TestCollide:
    """Tests for overlap detection and face classification."""

    def test_no_overlap(self) -> None:
        assert collide(Box(0.0, 0.0, 2.0, 2.0), Box(5.0, 0.0, 2.0, 2.0)) is None

    def test_touching_edges_do_not_collide(self) -> None:
        assert collide(Box(0.0, 0.0, 2.0, 2.0), Box(2.0, 0.0, 2.0, 2.0)) is None

    def test_left_face(self) -> None:
        assert collide(Box(9.0, 5.0, 4.0, 4.0), Box(12.0, 5.0, 4.0, 4.0)) is Collision.LEFT

    def test_right_face(self) -> None:
        assert collide(Box(15.0, 5.0, 4.0, 4.0), Box(12.0, 5.0, 4.0, 4.0)) is Collision.RIGHT

    def test_bottom_face(self) -> None:
        assert collide(Box(12.0, 2.0, 4.0, 4.0), Box(12.0, 5.0, 4.0, 4.0)) is Collision.BOTTOM

    def test_top_face(self) -> None:
        assert collide(Box(12.0, 8.0, 4.0, 4.0), Box(12.0, 5.0, 4.0, 4.0)) is Collision.TOP


class TestDampDirection:
    """Tests for the damped, one-sided response."""

    def test_left_face_damps_and_flips_x(self) -> None:
        dx, dy = damp_direction(0.8, 0.6, Collision.LEFT)
        assert dx == pytest.approx(-0.08)
        assert dy == 0.6

    def test_right_face_damps_and_flips_x(self) -> None:
        dx, dy = damp_direction(-0.8, 0.6, Collision.RIGHT)
        assert dx == pytest.approx(0.08)
        assert dy == 0.6

    def test_bottom_face_damps_and_flips_y(self) -> None:
        assert damp_direction(0.6, 0.8, Collision.BOTTOM) == pytest.approx((0.6, -0.08))

    def test_top_face_damps_and_flips_y(self) -> None:
        assert damp_direction(0.6, -0.8, Collision.TOP) == pytest.approx((0.6, 0.08))

    def test_moving_away_is_untouched(self) -> None:
        assert damp_direction(-0.8, 0.6, Collision.LEFT) == (-0.8, 0.6)
        assert damp_direction(0.6, 0.8, Collision.TOP) == (0.6, 0.8)


class TestBroadPhase:
    """The broad phase must only skip pairs that cannot overlap."""

    def test_rejects_distant(self) -> None:
        assert broad_phase_rejects(Box(0.0, 0.0, 5.0, 5.0), Box(100.0, 0.0, 16.0, 16.0))

    def test_keeps_overlapping(self) -> None:
        ant = Box(0.0, 0.0, 5.0, 5.0)
        cell = Box(10.0, 10.0, 16.0, 16.0)
        assert collide(ant, cell) is not None
        assert not broad_phase_rejects(ant, cell)

    @pytest.mark.parametrize("offset", [0.0, 3.0, 6.0, 9.0, 10.4])
    def test_never_hides_a_corner_contact(self, offset: float) -> None:
        ant = Box(0.0, 0.0, 5.0, 5.0)
        cell = Box(offset, offset, 16.0, 16.0)
        if collide(ant, cell) is not None:
            assert not broad_phase_rejects(ant, cell)


class TestCollisionResolver:
    """Tests for heading resolution against several boxes."""

    def test_no_contact_keeps_heading(self) -> None:
        resolver = CollisionResolver()
        heading, hits = resolver.resolve(
            Box(0.0, 0.0, 2.0, 2.0),
            0.3,
            [Box(50.0, 50.0, 2.0, 2.0)],
        )
        assert heading == 0.3
        assert hits == []

    def test_heading_recomputed_from_damped_direction(self) -> None:
        resolver = CollisionResolver()
        heading = math.atan2(0.6, 0.8)
        new_heading, hits = resolver.resolve(
            Box(9.0, 5.0, 4.0, 4.0),
            heading,
            [Box(12.0, 5.0, 4.0, 4.0)],
        )
        assert hits == [Collision.LEFT]
        assert new_heading == pytest.approx(math.atan2(0.6, -0.08))
        # Resulting x component is -0.1x the prior one, before renormalising
        assert math.cos(new_heading) < 0

    def test_head_on_left_contact_reverses(self) -> None:
        resolver = CollisionResolver()
        new_heading, _ = resolver.resolve(
            Box(9.0, 5.0, 4.0, 4.0),
            0.0,
            [Box(12.0, 5.0, 4.0, 4.0)],
        )
        assert abs(new_heading) == pytest.approx(math.pi)

    def test_collisions_apply_sequentially(self) -> None:
        resolver = CollisionResolver()
        heading = math.atan2(0.6, 0.8)
        new_heading, hits = resolver.resolve(
            Box(0.0, 0.0, 2.0, 2.0),
            heading,
            [Box(1.8, 0.0, 2.0, 2.0), Box(0.0, 1.8, 2.0, 2.0)],
        )
        assert hits == [Collision.LEFT, Collision.BOTTOM]
        assert new_heading == pytest.approx(math.atan2(-0.06, -0.08))
        assert resolver.contacts == 2

    def test_arena_walls(self) -> None:
        arena = Arena(width=100.0, height=100.0, cell_size=10.0)
        resolver = CollisionResolver()
        # Ant poking out of the bottom edge while heading down-right
        heading = math.atan2(-0.6, 0.8)
        new_heading, hits = resolver.resolve(
            Box(50.0, 1.0, 5.0, 5.0),
            heading,
            arena.walls(),
        )
        assert hits == [Collision.TOP]
        assert new_heading == pytest.approx(math.atan2(0.06, 0.8))
