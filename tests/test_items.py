import pytest

from gempp.items import Color, EdgeItem, LabelItem, MatchStatus, VertexItem


def test_vertex_initial_state():
    item = VertexItem(0, 0, 10, 10)
    assert item.status is MatchStatus.UNMATCHED
    assert item.pen_color == Color(255, 0, 0, 255)
    assert item.brush_color.alpha == 0
    assert item.pen_width == 3


@pytest.mark.parametrize(
    "status, rgb",
    [
        (MatchStatus.UNMATCHED, (255, 0, 0)),
        (MatchStatus.CORRECT, (0, 255, 255)),
        (MatchStatus.INCORRECT, (255, 175, 0)),
    ],
)
def test_vertex_status_sets_colour(status, rgb):
    item = VertexItem(0, 0, 10, 10)
    item.status = status
    assert (item.pen_color.red, item.pen_color.green, item.pen_color.blue) == rgb


def test_vertex_select_and_view():
    item = VertexItem(0, 0, 10, 10)
    item.select(True)
    assert item.brush_color == item.pen_color.with_alpha(128)
    item.view(False)
    assert item.pen_color.alpha == 0
    item.view(True)
    assert item.pen_color.alpha == 255


def test_negative_coordinates_are_ignored():
    item = VertexItem(5, 6, 10, 10)
    item.x = -1
    item.y = -2
    assert (item.x, item.y) == (5, 6)


def test_left_keeps_right_edge():
    item = VertexItem(10, 10, 20, 20)
    right = item.right
    item.left = 4
    assert item.left == 4
    assert item.right == right
    item.left = -3
    assert item.left == 4


def test_top_keeps_bottom_edge():
    item = VertexItem(10, 10, 20, 20)
    bottom = item.bottom
    item.top = 2
    assert item.top == 2
    assert item.bottom == bottom


def test_right_and_bottom_setters():
    item = VertexItem(10, 10, 20, 20)
    item.right = 50
    item.bottom = 60
    assert item.right == 50
    assert item.bottom == 60
    assert item.left == 10


def test_translate_inside_area():
    item = VertexItem(10, 10, 20, 20)
    item.translate(5, 7, 100, 100)
    assert (item.x, item.y) == (10 + 5, 10 + 7)
    assert item.width == 20


def test_translate_outside_area_is_refused():
    item = VertexItem(10, 10, 20, 20)
    item.translate(-20, 0, 100, 100)
    item.translate(0, 90, 100, 100)
    assert (item.x, item.y) == (10, 10)


def test_fit_shrinks_to_area():
    item = VertexItem(10, 10, 50, 50)
    item.fit(40, 100)
    assert item.right == 40
    assert item.height == 50


def test_edge_joins_centres_and_defaults():
    origin = VertexItem(0, 0, 10, 10)
    target = VertexItem(20, 40, 10, 10)
    edge = EdgeItem(origin, target)
    assert edge.origin is origin and edge.target is target
    assert edge.line == (*map(int, origin.center), *map(int, target.center))
    assert edge.width == 4
    assert edge.color == Color(0, 0, 255, 128)


def test_edge_select_and_view():
    edge = EdgeItem(VertexItem(0, 0, 2, 2), VertexItem(4, 4, 2, 2))
    edge.select(True)
    assert edge.width == 8
    assert edge.color.alpha == 255
    edge.view(False)
    edge.select(True)
    assert edge.color.alpha == 0
    edge.view(True)
    edge.select(False)
    assert edge.color.alpha == 128


def test_label_view():
    label = LabelItem("v1")
    assert label.text == "v1"
    assert label.font == ("Helvetica", 10)
    assert label.color == Color(0, 0, 0, 255)
    label.view(False)
    assert label.color.alpha == 0
    label.view(True)
    assert label.color.alpha == 255