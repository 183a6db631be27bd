"""Tests for keeping bound arrow endpoints on their shapes."""

import math

import pytest

from arrowbind import (
    Arrow,
    BASE_BINDING_GAP,
    BindingEndpoint,
    BindingMode,
    ElementType,
    Shape,
    bind_arrow_to_element,
    get_arrow_midpoint,
    move_arrow_endpoint,
    mutate_element,
    update_arrow_bindings,
    update_arrow_endpoint,
    update_bound_arrow_endpoints,
)

START = BindingEndpoint.START
END = BindingEndpoint.END


def scene_point(arrow, index):
    px, py = arrow.points[index]
    return (arrow.x + px, arrow.y + py)


class TestUpdateBoundArrowEndpoints:
    def test_start_follows_moved_shape(self):
        rect = Shape(id="rect1", x=0.0, y=0.0, width=100.0, height=100.0)
        arrow = Arrow(id="arrow1", x=0.0, y=0.0, points=[(0.0, 0.0), (200.0, 0.0)])
        bind_arrow_to_element(arrow, START, rect, (1.0, 0.5))

        mutate_element(rect, x=50.0, y=50.0)
        update_bound_arrow_endpoints(rect, [rect, arrow])

        assert scene_point(arrow, 0) == pytest.approx((150.0 + BASE_BINDING_GAP, 100.0))
        assert scene_point(arrow, 0) == pytest.approx((155.0, 100.0))
        assert arrow.points[0] == (0.0, 0.0)
        assert scene_point(arrow, 1) == pytest.approx((200.0, 0.0))
        assert arrow.width == pytest.approx(45.0)
        assert arrow.height == pytest.approx(100.0)

    def test_end_follows_moved_shape(self):
        rect = Shape(id="rect1", x=200.0, y=0.0, width=100.0, height=100.0)
        arrow = Arrow(id="arrow1", x=0.0, y=50.0, points=[(0.0, 0.0), (200.0, 0.0)])
        bind_arrow_to_element(arrow, END, rect, (0.0, 0.5))

        mutate_element(rect, x=300.0, y=50.0)
        update_bound_arrow_endpoints(rect, [rect, arrow])

        assert scene_point(arrow, 0) == pytest.approx((0.0, 50.0))
        assert scene_point(arrow, -1) == pytest.approx((295.0, 100.0))

    def test_both_ends_on_same_shape(self):
        rect = Shape(id="rect1", x=0.0, y=0.0, width=100.0, height=100.0)
        arrow = Arrow(id="arrow1", x=150.0, y=0.0, points=[(0.0, 0.0), (0.0, 200.0), (-50.0, 200.0)])
        bind_arrow_to_element(arrow, START, rect, (1.0, 0.5))
        bind_arrow_to_element(arrow, END, rect, (0.5, 1.0))

        update_bound_arrow_endpoints(rect, [rect, arrow])

        assert scene_point(arrow, 0) == pytest.approx((105.0, 50.0))
        assert scene_point(arrow, 1) == pytest.approx((150.0, 200.0))
        assert scene_point(arrow, 2) == pytest.approx((50.0, 105.0))

    def test_rotated_shape(self):
        rect = Shape(id="rect1", x=0.0, y=0.0, width=100.0, height=100.0)
        arrow = Arrow(id="arrow1", x=300.0, y=300.0, points=[(0.0, 0.0), (10.0, 10.0)])
        bind_arrow_to_element(arrow, START, rect, (1.0, 0.5))

        mutate_element(rect, angle=math.pi / 2)
        update_bound_arrow_endpoints(rect, [rect, arrow])

        assert scene_point(arrow, 0) == pytest.approx((50.0, 105.0))

    def test_non_bindable_is_noop(self):
        arrow = Arrow(id="arrow1", points=[(0.0, 0.0), (10.0, 0.0)])
        update_bound_arrow_endpoints(arrow, [arrow])
        assert arrow.points == [(0.0, 0.0), (10.0, 0.0)]
        assert arrow.version == 0

    def test_no_bound_elements_is_noop(self):
        rect = Shape(id="rect1", width=100.0, height=100.0)
        update_bound_arrow_endpoints(rect, [rect])
        assert rect.bound_elements == []

    def test_missing_arrow_is_skipped(self):
        rect = Shape(id="rect1", width=100.0, height=100.0)
        arrow = Arrow(id="arrow1", points=[(0.0, 0.0), (10.0, 0.0)])
        bind_arrow_to_element(arrow, START, rect, (1.0, 0.5))
        update_bound_arrow_endpoints(rect, [rect])
        assert arrow.points == [(0.0, 0.0), (10.0, 0.0)]


class TestUpdateArrowEndpoint:
    def test_unbound_endpoint_is_noop(self):
        rect = Shape(id="rect1", width=100.0, height=100.0)
        arrow = Arrow(id="arrow1", points=[(0.0, 0.0), (10.0, 0.0)])
        update_arrow_endpoint(arrow, START, rect)
        assert arrow.version == 0

    def test_commits_geometry_in_one_mutation(self):
        rect = Shape(id="rect1", width=100.0, height=100.0)
        arrow = Arrow(id="arrow1", x=300.0, points=[(0.0, 0.0), (10.0, 0.0)])
        bind_arrow_to_element(arrow, END, rect, (1.0, 0.5))
        version = arrow.version
        update_arrow_endpoint(arrow, END, rect)
        assert arrow.version == version + 1

    def test_single_point_arrow_end_uses_index_zero(self):
        rect = Shape(id="rect1", width=100.0, height=100.0)
        arrow = Arrow(id="arrow1", x=300.0, y=300.0, points=[(0.0, 0.0)])
        bind_arrow_to_element(arrow, END, rect, (1.0, 0.5))
        update_arrow_endpoint(arrow, END, rect)
        assert arrow.points == [(0.0, 0.0)]
        assert (arrow.x, arrow.y) == pytest.approx((105.0, 50.0))
        assert (arrow.width, arrow.height) == (0.0, 0.0)

    def test_inside_binding_lands_on_fixed_point(self):
        rect = Shape(id="rect1", x=0.0, y=0.0, width=100.0, height=50.0)
        arrow = Arrow(id="arrow1", x=300.0, y=300.0, points=[(0.0, 0.0), (10.0, 10.0)])
        bind_arrow_to_element(arrow, START, rect, (0.75, 0.5), BindingMode.INSIDE)
        update_arrow_endpoint(arrow, START, rect)
        assert scene_point(arrow, 0) == pytest.approx((75.0, 25.0))

        mutate_element(rect, x=100.0)
        update_bound_arrow_endpoints(rect, [rect, arrow])
        assert scene_point(arrow, 0) == pytest.approx((175.0, 25.0))

    def test_ellipse_target(self):
        ellipse = Shape(id="e1", element_type=ElementType.ELLIPSE, width=200.0, height=100.0)
        arrow = Arrow(id="arrow1", x=100.0, y=-100.0, points=[(0.0, 0.0), (0.0, -50.0)])
        bind_arrow_to_element(arrow, START, ellipse, (0.5, 0.0))
        update_arrow_endpoint(arrow, START, ellipse)
        assert scene_point(arrow, 0) == pytest.approx((100.0, -5.0))
        assert scene_point(arrow, 1) == pytest.approx((100.0, -150.0))


class TestUpdateArrowBindings:
    def test_resolves_both_targets(self):
        left = Shape(id="left", x=0.0, y=0.0, width=100.0, height=100.0)
        right = Shape(id="right", x=300.0, y=0.0, width=100.0, height=100.0)
        arrow = Arrow(id="arrow1", x=120.0, y=50.0, points=[(0.0, 0.0), (160.0, 0.0)])
        bind_arrow_to_element(arrow, START, left, (1.0, 0.5))
        bind_arrow_to_element(arrow, END, right, (0.0, 0.5))

        update_arrow_bindings(arrow, [left, right, arrow])

        assert scene_point(arrow, 0) == pytest.approx((105.0, 50.0))
        assert scene_point(arrow, 1) == pytest.approx((295.0, 50.0))

    def test_deleted_target_is_skipped(self):
        rect = Shape(id="rect1", width=100.0, height=100.0)
        arrow = Arrow(id="arrow1", x=300.0, points=[(0.0, 0.0), (10.0, 0.0)])
        bind_arrow_to_element(arrow, START, rect, (1.0, 0.5))
        rect.is_deleted = True
        version = arrow.version
        update_arrow_bindings(arrow, [rect, arrow])
        assert arrow.version == version
        assert (arrow.x, arrow.y) == (300.0, 0.0)


class TestMoveArrowEndpoint:
    def test_moving_start_renormalizes(self):
        arrow = Arrow(id="arrow1", points=[(0.0, 0.0), (100.0, 0.0)])
        move_arrow_endpoint(arrow, START, (20.0, 30.0))
        assert (arrow.x, arrow.y) == (20.0, 30.0)
        assert arrow.points == [(0.0, 0.0), (80.0, -30.0)]
        assert (arrow.width, arrow.height) == (80.0, 30.0)

    def test_moving_end_keeps_origin(self):
        arrow = Arrow(id="arrow1", x=10.0, y=10.0, points=[(0.0, 0.0), (100.0, 0.0)])
        move_arrow_endpoint(arrow, END, (60.0, 110.0))
        assert (arrow.x, arrow.y) == (10.0, 10.0)
        assert arrow.points == [(0.0, 0.0), (50.0, 100.0)]


class TestArrowMidpoint:
    def test_polyline_midpoint(self):
        arrow = Arrow(id="arrow1", x=10.0, y=10.0, points=[(0.0, 0.0), (100.0, 0.0), (100.0, 100.0)])
        assert get_arrow_midpoint(arrow) == pytest.approx((110.0, 10.0))

    def test_straight_midpoint(self):
        arrow = Arrow(id="arrow1", points=[(0.0, 0.0), (50.0, 100.0)])
        assert get_arrow_midpoint(arrow) == pytest.approx((25.0, 50.0))

    def test_single_point(self):
        arrow = Arrow(id="arrow1", x=5.0, y=7.0)
        assert get_arrow_midpoint(arrow) == (5.0, 7.0)
