"""Dialog for capturing a drawn or typed signature value."""

from __future__ import annotations

from enum import Enum

from PySide6.QtGui import QAction, QActionGroup
from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QLineEdit,
    QStackedWidget,
    QToolBar,
    QVBoxLayout,
)

from fieldpress.model.field import FieldType
from fieldpress.viewer.signature_pad import SignaturePad


class CaptureMode(str, Enum):
    DRAW = "draw"
    TYPE = "type"


class SignatureDialog(QDialog):
    def __init__(self, field_type: FieldType = FieldType.SIGNATURE, parent=None) -> None:
        super().__init__(parent)
        title = "Initials" if field_type is FieldType.INITIALS else "Signature"
        self.setWindowTitle(f"Add {title}")
        self.resize(520, 300)

        self._mode = CaptureMode.DRAW

        self.pad = SignaturePad()
        self.pad.strokes_changed.connect(self._update_buttons)

        self.typed = QLineEdit()
        self.typed.setPlaceholderText(f"Type your {title.lower()}")
        self.typed.textChanged.connect(lambda _text: self._update_buttons())

        self.stack = QStackedWidget()
        self.stack.addWidget(self.pad)
        self.stack.addWidget(self.typed)

        self.buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self)
        layout.addWidget(self._build_toolbar())
        layout.addWidget(self.stack)
        layout.addWidget(self.buttons)

        self._update_buttons()

    def _build_toolbar(self) -> QToolBar:
        toolbar = QToolBar("Signature Toolbar")
        toolbar.setMovable(False)

        mode_group = QActionGroup(self)
        mode_group.setExclusive(True)

        self._draw_action = QAction("Draw", self)
        self._draw_action.setCheckable(True)
        self._draw_action.setChecked(True)
        self._draw_action.triggered.connect(lambda: self.set_mode(CaptureMode.DRAW))
        mode_group.addAction(self._draw_action)
        toolbar.addAction(self._draw_action)

        self._type_action = QAction("Type", self)
        self._type_action.setCheckable(True)
        self._type_action.triggered.connect(lambda: self.set_mode(CaptureMode.TYPE))
        mode_group.addAction(self._type_action)
        toolbar.addAction(self._type_action)

        toolbar.addSeparator()

        clear_action = QAction("Clear", self)
        clear_action.triggered.connect(self.clear)
        toolbar.addAction(clear_action)
        return toolbar

    @property
    def mode(self) -> CaptureMode:
        return self._mode

    def set_mode(self, mode: CaptureMode) -> None:
        self._mode = mode
        self.stack.setCurrentWidget(self.pad if mode is CaptureMode.DRAW else self.typed)
        (self._draw_action if mode is CaptureMode.DRAW else self._type_action).setChecked(True)
        self._update_buttons()

    def clear(self) -> None:
        if self._mode is CaptureMode.DRAW:
            self.pad.clear()
        else:
            self.typed.clear()

    def value(self) -> str:
        if self._mode is CaptureMode.DRAW:
            return self.pad.value()
        return self.typed.text().strip()

    def _update_buttons(self) -> None:
        ok_button = self.buttons.button(QDialogButtonBox.StandardButton.Ok)
        ok_button.setEnabled(bool(self.value()))
