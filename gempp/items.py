"""Display items for graph views: vertex boxes, edge lines and text labels."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


@dataclass(frozen=True)
class Color:
    """An RGBA colour with 8-bit components."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    def with_alpha(self, alpha: int) -> "Color":
        return replace(self, alpha=alpha)


class MatchStatus(Enum):
    UNMATCHED = Color(255, 0, 0)
    INCORRECT = Color(255, 175, 0)
    CORRECT = Color(0, 255, 255)

    @property
    def color(self) -> Color:
        return self.value


class VertexItem:
    """A rectangular vertex box whose geometry refuses negative coordinates."""

    def __init__(self, x: float, y: float, width: float, height: float) -> None:
        self._x = x
        self._y = y
        self._width = width
        self._height = height
        self.pen_width = 3
        self.pen_color = Color(0, 0, 0)
        self.brush_color = Color(0, 0, 0, 0)
        self.status = MatchStatus.UNMATCHED
        self.select(False)
        self.view(True)

    @property
    def status(self) -> MatchStatus:
        return self._status

    @status.setter
    def status(self, status: MatchStatus) -> None:
        self._status = status
        self.pen_color = status.color

    def view(self, visible: bool = True) -> None:
        self.pen_color = self.pen_color.with_alpha(255 if visible else 0)

    def select(self, selected: bool = True) -> None:
        self.brush_color = self.pen_color.with_alpha(128 if selected else 0)

    @property
    def x(self) -> float:
        return self._x

    @x.setter
    def x(self, value: float) -> None:
        if value >= 0:
            self._x = value

    @property
    def y(self) -> float:
        return self._y

    @y.setter
    def y(self, value: float) -> None:
        if value >= 0:
            self._y = value

    @property
    def width(self) -> float:
        return self._width

    @width.setter
    def width(self, value: float) -> None:
        if self._x >= 0:
            self._width = value

    @property
    def height(self) -> float:
        return self._height

    @height.setter
    def height(self, value: float) -> None:
        if self._y >= 0:
            self._height = value

    @property
    def left(self) -> float:
        return self.x

    @left.setter
    def left(self, value: float) -> None:
        if value >= 0:
            self.width = self.width + self.x - value
            self.x = value

    @property
    def right(self) -> float:
        return self.x + self.width

    @right.setter
    def right(self, value: float) -> None:
        self.width = value - self.left

    @property
    def top(self) -> float:
        return self.y

    @top.setter
    def top(self, value: float) -> None:
        if value >= 0:
            self.height = self.height + self.y - value
            self.y = value

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @bottom.setter
    def bottom(self, value: float) -> None:
        self.height = value - self.top

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    def translate(self, dx: float, dy: float, width: float, height: float) -> None:
        """Move by (dx, dy) only if the box stays inside a width x height area."""
        if (
            self.left + dx >= 0
            and self.right + dx <= width
            and self.top + dy >= 0
            and self.bottom + dy <= height
        ):
            self.x = self.x + dx
            self.y = self.y + dy

    def fit(self, width: float, height: float) -> None:
        """Shrink the box so that it fits in a width x height area."""
        self.width = min(self.width, width - self.x)
        self.height = min(self.height, height - self.y)


class EdgeItem:
    """A line joining the centres of two vertex boxes."""

    def __init__(self, origin: VertexItem, target: VertexItem) -> None:
        ox, oy = origin.center
        tx, ty = target.center
        self.line = (int(ox), int(oy), int(tx), int(ty))
        self.origin = origin
        self.target = target
        self.color = Color(0, 0, 255)
        self.width = 1
        self.view(True)
        self.select(False)

    def select(self, selected: bool = True) -> None:
        self.width = 8 if selected else 4
        visible = self.color.alpha > 0
        self.color = self.color.with_alpha(visible * (255 if selected else 128))

    def view(self, visible: bool = True) -> None:
        self.color = self.color.with_alpha(128 if visible else 0)


class LabelItem:
    """A simple text label."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.font = ("Helvetica", 10)
        self.color = Color(0, 0, 0)

    def view(self, visible: bool = True) -> None:
        self.color = self.color.with_alpha(255 if visible else 0)