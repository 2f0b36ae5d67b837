from __future__ import annotations

import logging
import threading
from pathlib import Path

from PyQt5.QtCore import QEvent, Qt, QThread, pyqtSignal
from PyQt5.QtGui import QColor, QKeyEvent, QPalette, QPixmap
from PyQt5.QtWidgets import (
    QCheckBox, QComboBox, QFrame, QHBoxLayout, QLabel, QPushButton,
    QStyledItemDelegate, QStyleOptionViewItem, QVBoxLayout, QWidget
)

from .config import AppConfig, Settings, save_settings
from .errors import PersistenceWriteFailure
from .obs import ObsExporter
from .persistence import atomic_write_json

logger = logging.getLogger(__name__)

IMAGE_SIZE = 200
WIN_HOTKEY = Qt.Key_F17

STYLE_SHEET = """
    QWidget {
        background-color: #141414;
        color: #E0FFFF;
        font-family: 'Segoe UI';
        font-size: 14px;
    }
    QPushButton {
        background-color: #1f1f2e;
        border: 1px solid #3b3b4f;
        border-radius: 8px;
        padding: 6px;
    }
    QPushButton:hover {
        background-color: #29293d;
    }
    QComboBox {
        background-color: rgba(30, 30, 40, 0.9);
        border: 1px solid #5a5a7a;
        border-radius: 8px;
        padding: 6px 30px 6px 10px;
        color: #E0FFFF;
        font-weight: 500;
        font-size: 13px;
    }
    QComboBox:hover {
        background-color: rgba(50, 50, 70, 1.0);
        border: 1px solid #7c7c9c;
    }
    QFrame {
        border: 1px solid #444;
        border-radius: 12px;
        padding: 8px;
        margin: 6px;
        background-color: #1a1a1a;
    }
"""

WIN_STYLE = """
    QPushButton {
        background-color: #228B22;
        color: white;
        border: 1px solid #1e7c1e;
        border-radius: 8px;
        padding: 6px;
    }
    QPushButton:hover {
        background-color: #2e8b57;
    }
"""

LOSS_STYLE = """
    QPushButton {
        background-color: #8b0000;
        color: white;
        border: 1px solid #aa0000;
        border-radius: 8px;
        padding: 6px;
    }
    QPushButton:hover {
        background-color: #b22222;
    }
"""


class SaveWorker(QThread):
    """Writes streak snapshots on its own thread.

    Only the latest submitted snapshot is kept, so a burst of wins turns into
    one write. ``stop()`` flushes whatever is still pending.
    """

    saved = pyqtSignal()
    failed = pyqtSignal(str)

    def __init__(self, path, parent=None):
        super().__init__(parent)
        self.path = Path(path)
        self._cond = threading.Condition()
        self._pending = None
        self._stopping = False

    def submit(self, document):
        with self._cond:
            self._pending = document
            self._cond.notify()

    def stop(self):
        with self._cond:
            self._stopping = True
            self._cond.notify()
        if self.isRunning():
            self.wait()
        else:
            self.run()

    def run(self):
        while True:
            with self._cond:
                while self._pending is None and not self._stopping:
                    self._cond.wait()
                document, self._pending = self._pending, None
            if document is None:
                return
            try:
                atomic_write_json(self.path, document)
            except PersistenceWriteFailure as exc:
                logger.error("%s", exc)
                self.failed.emit(str(exc))
            else:
                self.saved.emit()


class CenteredComboDelegate(QStyledItemDelegate):
    def initStyleOption(self, option: QStyleOptionViewItem, index):
        super().initStyleOption(option, index)
        option.displayAlignment = Qt.AlignHCenter


class WinStreakApp(QWidget):
    def __init__(self, session, config: AppConfig, settings: Settings, worker: SaveWorker):
        super().__init__()
        self.session = session
        self.config = config
        self.settings = settings
        self.worker = worker
        self.lock_active = False
        self.obs = ObsExporter(config.obs_dir, config.icons_dir, enabled=settings.obs_enabled)

        self.setWindowTitle("Winstreak Tracker")
        self.setFixedSize(420, 640)
        self.setup_palette()
        self.init_ui()
        self.installEventFilter(self)

        self.worker.failed.connect(self.show_save_error)
        self.worker.saved.connect(self.clear_save_error)
        self.session.subscribe(self.obs)
        self.session.subscribe(lambda _session: self.refresh())
        self.refresh()
        self.obs(self.session)

    def setup_palette(self):
        palette = QPalette()
        palette.setColor(QPalette.Window, QColor(20, 20, 20))
        palette.setColor(QPalette.WindowText, QColor(200, 255, 255))
        self.setPalette(palette)
        self.setStyleSheet(STYLE_SHEET)

    def init_ui(self):
        layout = QVBoxLayout()

        self.dropdown = QComboBox()
        self.dropdown.setItemDelegate(CenteredComboDelegate(self.dropdown))
        self.dropdown.activated.connect(self.on_character_activated)

        self.category_dropdown = QComboBox()
        self.category_dropdown.setItemDelegate(CenteredComboDelegate(self.category_dropdown))
        self.category_dropdown.activated.connect(self.on_category_activated)

        name_layout = QHBoxLayout()
        self.name_label = QLabel("Character: -")
        self.lock_checkbox = QCheckBox("Lock Active")
        self.lock_checkbox.stateChanged.connect(self.toggle_lock)
        name_layout.addWidget(self.name_label)
        name_layout.addStretch()
        name_layout.addWidget(self.lock_checkbox)

        self.prev_button = QPushButton("◀")
        self.prev_button.clicked.connect(self.session.previous_character)
        self.next_button = QPushButton("▶")
        self.next_button.clicked.connect(self.session.next_character)

        self.image_label = QLabel()
        self.image_label.setFixedSize(IMAGE_SIZE, IMAGE_SIZE)
        self.image_label.setAlignment(Qt.AlignCenter)
        image_wrapper = QHBoxLayout()
        image_wrapper.addWidget(self.prev_button)
        image_wrapper.addStretch()
        image_wrapper.addWidget(self.image_label)
        image_wrapper.addStretch()
        image_wrapper.addWidget(self.next_button)

        self.streak_label = QLabel("🔥 Current Streak: 0")
        self.best_label = QLabel("🥇 Personal Best: LIVE")

        self.win_button = QPushButton("+ Add Win")
        self.win_button.setStyleSheet(WIN_STYLE)
        self.win_button.clicked.connect(self.session.win)

        self.loss_button = QPushButton("✘ Record Loss")
        self.loss_button.setStyleSheet(LOSS_STYLE)
        self.loss_button.clicked.connect(self.session.loss)

        self.rescan_button = QPushButton("🔄 Rescan Portraits")
        self.rescan_button.clicked.connect(self.session.rescan)

        self.obs_toggle = QCheckBox("Enable OBS Output")
        self.obs_toggle.setChecked(self.settings.obs_enabled)
        self.obs_toggle.stateChanged.connect(self.toggle_obs)

        self.obs_status = QLabel()
        self.obs_status.setAlignment(Qt.AlignCenter)
        self.obs_status.setWordWrap(True)
        self.update_obs_status()

        self.save_status = QLabel()
        self.save_status.setAlignment(Qt.AlignCenter)
        self.save_status.setWordWrap(True)
        self.save_status.setStyleSheet("color: #ff6b6b;")
        self.save_status.setVisible(False)

        frame = QFrame()
        frame_layout = QVBoxLayout()
        frame_layout.addWidget(self.dropdown)
        frame_layout.addWidget(self.category_dropdown)
        frame_layout.addLayout(name_layout)
        frame_layout.addLayout(image_wrapper)
        frame_layout.addWidget(self.streak_label)
        frame_layout.addWidget(self.best_label)
        frame_layout.addWidget(self.win_button)
        frame_layout.addWidget(self.loss_button)
        frame_layout.addWidget(self.obs_toggle)
        frame_layout.addWidget(self.obs_status)
        frame_layout.addWidget(self.rescan_button)
        frame.setLayout(frame_layout)

        layout.addWidget(frame)
        layout.addWidget(self.save_status)
        self.setLayout(layout)

    def eventFilter(self, obj, event):
        if event.type() == QEvent.KeyPress and isinstance(event, QKeyEvent):
            if event.key() == WIN_HOTKEY and self.lock_active:
                self.session.win()
                return True
        return super().eventFilter(obj, event)

    def refresh(self):
        session = self.session
        self._fill(self.dropdown, session.character_names)
        self._fill(self.category_dropdown, session.category_names)
        if session.character_index is not None:
            self.dropdown.setCurrentIndex(session.character_index)
        self.category_dropdown.setCurrentIndex(session.category_index)

        self.name_label.setText(f"Character: {session.character_name}")
        self.streak_label.setText(f"🔥 Current Streak: {session.current}")
        best = session.personal_best
        self.best_label.setText(f"🥇 Personal Best: {best if best > 0 else 'LIVE'}")

        image = session.character_image
        if image:
            self.image_label.setPixmap(
                QPixmap(str(image)).scaled(IMAGE_SIZE, IMAGE_SIZE, Qt.KeepAspectRatio, Qt.SmoothTransformation)
            )
        else:
            self.image_label.clear()

        enabled = session.has_character
        for widget in (self.win_button, self.loss_button, self.prev_button, self.next_button):
            widget.setEnabled(enabled)

    @staticmethod
    def _fill(combo, items):
        if [combo.itemText(i) for i in range(combo.count())] == list(items):
            return
        combo.blockSignals(True)
        combo.clear()
        combo.addItems(items)
        combo.blockSignals(False)

    def on_character_activated(self, index):
        self.session.select_character(index)

    def on_category_activated(self, index):
        self.session.select_category(index)

    def toggle_lock(self, state):
        self.lock_active = state == Qt.Checked
        self.dropdown.setDisabled(self.lock_active)
        self.category_dropdown.setDisabled(self.lock_active)
        if self.lock_active:
            self.obs(self.session)

    def toggle_obs(self, state):
        self.obs.enabled = state == Qt.Checked
        self.settings.obs_enabled = self.obs.enabled
        try:
            save_settings(self.config.settings_file, self.settings)
        except OSError as exc:
            logger.warning("Could not save settings: %s", exc)
        self.update_obs_status()
        self.obs(self.session)

    def update_obs_status(self):
        self.obs_status.setText(f"OBS output: ON → {self.config.obs_dir}" if self.obs.enabled else "OBS output: OFF")

    def show_save_error(self, message):
        self.save_status.setText(f"⚠ Streaks not saved, will retry on next change.\n{message}")
        self.save_status.setVisible(True)

    def clear_save_error(self):
        self.save_status.setVisible(False)

    def closeEvent(self, event):
        self.worker.stop()
        super().closeEvent(event)
