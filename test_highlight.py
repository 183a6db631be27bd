"""Tests for the suggested-binding highlight."""

import math
from unittest.mock import MagicMock

import pytest
from PySide6.QtCore import QPointF, QRectF
from PySide6.QtGui import QColor, QImage, QPainter

from arrowbind import (
    Arrow,
    Element,
    ElementType,
    Shape,
    TextElement,
    Theme,
    UnsupportedShapeError,
    render_suggested_binding,
    resolve_highlight_color,
)


@pytest.fixture
def painter():
    return MagicMock()


class TestRenderSuggestedBinding:
    def test_arrow_draws_nothing(self, painter):
        render_suggested_binding(painter, Arrow(id="arrow1"), 1.0, Theme.LIGHT)
        assert painter.method_calls == []

    def test_text_draws_nothing(self, painter):
        render_suggested_binding(painter, TextElement(id="text1", text="hi"), 1.0, Theme.LIGHT)
        assert painter.method_calls == []

    def test_rectangle_outline_scales_with_zoom(self, painter):
        rect = Shape(id="rect1", x=10.0, y=20.0, width=100.0, height=50.0)
        render_suggested_binding(painter, rect, 2.0, Theme.LIGHT)

        painter.save.assert_called_once()
        painter.restore.assert_called_once()
        painter.translate.assert_called_once_with(60.0, 45.0)
        painter.rotate.assert_called_once_with(0.0)
        painter.drawRect.assert_called_once_with(QRectF(-53.0, -28.0, 106.0, 56.0))

        pen = painter.setPen.call_args[0][0]
        assert pen.widthF() == pytest.approx(1.0)
        assert pen.color() == QColor("#4a90d9")

    def test_ellipse_outline(self, painter):
        ellipse = Shape(id="e1", element_type=ElementType.ELLIPSE, width=100.0, height=50.0)
        render_suggested_binding(painter, ellipse, 1.0, Theme.LIGHT)
        painter.drawEllipse.assert_called_once_with(QPointF(0.0, 0.0), 56.0, 31.0)

    def test_diamond_outline(self, painter):
        diamond = Shape(id="d1", element_type=ElementType.DIAMOND, width=100.0, height=80.0)
        render_suggested_binding(painter, diamond, 1.0, Theme.DARK)

        polygon = painter.drawPolygon.call_args[0][0]
        assert polygon.count() == 4
        assert polygon.at(0) == QPointF(0.0, -46.0)
        assert polygon.at(1) == QPointF(56.0, 0.0)
        assert polygon.at(2) == QPointF(0.0, 46.0)
        assert polygon.at(3) == QPointF(-56.0, 0.0)
        assert painter.setPen.call_args[0][0].color() == QColor("#035da1")

    def test_rotation_is_applied_in_degrees(self, painter):
        rect = Shape(id="rect1", width=100.0, height=100.0, angle=math.pi / 2)
        render_suggested_binding(painter, rect, 1.0, Theme.LIGHT)
        assert painter.rotate.call_args[0][0] == pytest.approx(90.0)

    def test_unsupported_kind_raises(self, painter):
        line = Element(id="line1", element_type=ElementType.LINE, width=10.0, height=10.0)
        with pytest.raises(UnsupportedShapeError):
            render_suggested_binding(painter, line, 1.0, Theme.LIGHT)
        painter.drawRect.assert_not_called()

    def test_paints_onto_image(self, app):
        image = QImage(200, 200, QImage.Format_ARGB32)
        image.fill(QColor("#ffffff"))
        painter = QPainter(image)
        rect = Shape(id="rect1", x=50.0, y=50.0, width=100.0, height=100.0)
        render_suggested_binding(painter, rect, 1.0, Theme.LIGHT)
        painter.end()

        highlight = resolve_highlight_color(Theme.LIGHT)
        row = [image.pixelColor(x, 100).name() for x in range(40, 49)]
        assert highlight.name() in row
        assert image.pixelColor(100, 100).name() == "#ffffff"


class TestResolveHighlightColor:
    def test_themes_differ(self):
        assert resolve_highlight_color(Theme.LIGHT) == QColor("#4a90d9")
        assert resolve_highlight_color(Theme.DARK) == QColor("#035da1")
