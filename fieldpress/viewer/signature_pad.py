"""Interactive freehand signature pad."""

from __future__ import annotations

from PySide6.QtCore import QPointF, Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPainterPath, QPen
from PySide6.QtWidgets import QWidget

from fieldpress.model.signature import VectorSignature
from fieldpress.signature.strokes import DEFAULT_STROKE_WIDTH, StrokeRecorder, trace_strokes


class PainterSurface:
    """DrawingSurface backed by a QPainter."""

    def __init__(self, painter: QPainter) -> None:
        self._painter = painter
        self._path: QPainterPath | None = None

    def move_to(self, x: float, y: float) -> None:
        self._path = QPainterPath(QPointF(x, y))

    def line_to(self, x: float, y: float) -> None:
        if self._path is None:
            self.move_to(x, y)
            return
        self._path.lineTo(x, y)

    def stroke(self) -> None:
        if self._path is None:
            return
        if self._path.elementCount() == 1:
            # single tap
            point = self._path.currentPosition()
            self._painter.drawPoint(point)
        else:
            self._painter.drawPath(self._path)
        self._path = None


class SignaturePad(QWidget):
    strokes_changed = Signal()

    def __init__(self, stroke_width: float = DEFAULT_STROKE_WIDTH) -> None:
        super().__init__()
        self._recorder = StrokeRecorder()
        self._stroke_width = stroke_width

        self.setMinimumSize(400, 160)
        self.setCursor(Qt.CursorShape.CrossCursor)

    @property
    def is_empty(self) -> bool:
        return self._recorder.is_empty

    def signature(self) -> VectorSignature:
        return self._recorder.to_signature()

    def value(self) -> str:
        if self._recorder.is_empty:
            return ""
        return self.signature().to_json()

    def load(self, signature: VectorSignature) -> None:
        self._recorder.load(signature)
        self.strokes_changed.emit()
        self.update()

    def clear(self) -> None:
        self._recorder.clear()
        self.strokes_changed.emit()
        self.update()

    def paintEvent(self, event) -> None:  # type: ignore[override]
        del event
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), QColor("#ffffff"))

        pen = QPen(QColor("#000000"))
        pen.setWidthF(self._stroke_width)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        painter.setPen(pen)
        trace_strokes(self._recorder.groups, PainterSurface(painter))
        painter.end()

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton:
            return
        position = event.position()
        self._recorder.pointer_down(position.x(), position.y())
        self.update()

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        if not self._recorder.is_active:
            return
        position = event.position()
        self._recorder.pointer_move(position.x(), position.y())
        self.update()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        del event
        if not self._recorder.is_active:
            return
        self._recorder.pointer_up()
        self.strokes_changed.emit()
