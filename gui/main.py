from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QBrush, QColor, QPainter, QPen
from PyQt6.QtWidgets import (
    QApplication,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QSpinBox,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from route_core.engine import EngineConfig
from route_core.grid import Grid
from route_core.runtime import build_grid, load_app_config
from route_core.types import Coord, Fault, PathResult


class MapWidget(QWidget):
    def __init__(self, width: int = 10, height: int = 10, cell_size: int = 36):
        super().__init__()
        self.cell_size = cell_size
        self.grid: Optional[Grid] = None
        self.result: Optional[PathResult] = None
        self.start: Coord = (0, 0)
        self.goal: Coord = (width - 1, height - 1)
        self.on_cell_clicked = None
        self.resize_grid(width, height)

    def resize_grid(self, width: int, height: int):
        self.setFixedSize(width * self.cell_size, height * self.cell_size)

    def set_site(self, grid: Grid, start: Coord, goal: Coord, result: Optional[PathResult]):
        self.grid = grid
        self.start = start
        self.goal = goal
        self.result = result
        self.resize_grid(grid.width, grid.height)
        self.update()

    def _cell_rect(self, pos: Coord) -> tuple[int, int, int, int]:
        return (
            pos[0] * self.cell_size,
            pos[1] * self.cell_size,
            self.cell_size,
            self.cell_size,
        )

    def mousePressEvent(self, event):
        if self.grid is None or self.on_cell_clicked is None:
            return
        point = event.position()
        pos = (int(point.x()) // self.cell_size, int(point.y()) // self.cell_size)
        if self.grid.in_bounds(pos):
            self.on_cell_clicked(pos)

    def paintEvent(self, event):
        if self.grid is None:
            return

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        for x in range(self.grid.width):
            for y in range(self.grid.height):
                cost = self.grid.terrain_cost((x, y))
                shade = 255 if isinstance(cost, Fault) else max(120, 255 - 30 * (cost - 1))
                painter.setPen(QPen(QColor(100, 100, 100), 1))
                painter.setBrush(QBrush(QColor(shade, shade, int(shade * 0.85))))
                painter.drawRect(*self._cell_rect((x, y)))

        painter.setBrush(QBrush(QColor(80, 80, 80)))
        for obs in self.grid.obstacles:
            painter.drawRect(*self._cell_rect(obs))

        if self.result is not None and self.result.found:
            painter.setPen(QPen(QColor(0, 100, 255), 3))
            half = self.cell_size // 2
            path = self.result.path
            for a, b in zip(path, path[1:]):
                painter.drawLine(
                    a[0] * self.cell_size + half,
                    a[1] * self.cell_size + half,
                    b[0] * self.cell_size + half,
                    b[1] * self.cell_size + half,
                )

        painter.setPen(QPen(QColor(40, 40, 40), 1))
        for pos, color in ((self.start, QColor(0, 100, 255)), (self.goal, QColor(0, 200, 0))):
            painter.setBrush(QBrush(color))
            painter.drawEllipse(
                pos[0] * self.cell_size + 4,
                pos[1] * self.cell_size + 4,
                self.cell_size - 8,
                self.cell_size - 8,
            )


class RouteGUI(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Site Router")
        self.setGeometry(100, 100, 900, 600)

        self.grid: Optional[Grid] = None
        self.result: Optional[PathResult] = None
        self.config_path = Path(__file__).resolve().parents[1] / "configs" / "demo.json"

        self._setup_ui()
        self._setup_default_site()

    def _setup_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QHBoxLayout(central)

        left_panel = QVBoxLayout()
        main_layout.addLayout(left_panel, 2)

        map_group = QGroupBox("Site")
        map_layout = QVBoxLayout()
        self.map_widget = MapWidget(width=10, height=10)
        self.map_widget.on_cell_clicked = self._mark_cell
        map_layout.addWidget(self.map_widget, alignment=Qt.AlignmentFlag.AlignCenter)
        map_group.setLayout(map_layout)
        left_panel.addWidget(map_group)

        status_layout = QHBoxLayout()
        self.outcome_label = QLabel("Outcome: -")
        status_layout.addWidget(self.outcome_label)
        self.cost_label = QLabel("Cost: -")
        status_layout.addWidget(self.cost_label)
        self.expansions_label = QLabel("Expansions: 0")
        status_layout.addWidget(self.expansions_label)
        left_panel.addLayout(status_layout)

        right_panel = QVBoxLayout()
        main_layout.addLayout(right_panel, 1)

        settings_group = QGroupBox("Settings")
        settings_layout = QFormLayout()

        self.width_spin = self._spin(1, 40, 10)
        self.width_spin.valueChanged.connect(self._setup_default_site)
        settings_layout.addRow("Width:", self.width_spin)

        self.height_spin = self._spin(1, 40, 10)
        self.height_spin.valueChanged.connect(self._setup_default_site)
        settings_layout.addRow("Height:", self.height_spin)

        self.start_x_spin = self._spin(0, 39, 0)
        self.start_y_spin = self._spin(0, 39, 0)
        self.goal_x_spin = self._spin(0, 39, 9)
        self.goal_y_spin = self._spin(0, 39, 9)
        settings_layout.addRow("Start x:", self.start_x_spin)
        settings_layout.addRow("Start y:", self.start_y_spin)
        settings_layout.addRow("Goal x:", self.goal_x_spin)
        settings_layout.addRow("Goal y:", self.goal_y_spin)

        self.max_expansions_spin = self._spin(1, 100000, 5000)
        settings_layout.addRow("Max expansions:", self.max_expansions_spin)

        settings_group.setLayout(settings_layout)
        right_panel.addWidget(settings_group)

        self.find_btn = QPushButton("Find path")
        self.find_btn.clicked.connect(self._find_path)
        right_panel.addWidget(self.find_btn)

        self.load_btn = QPushButton("Load demo config")
        self.load_btn.clicked.connect(self._load_config)
        right_panel.addWidget(self.load_btn)

        self.reset_btn = QPushButton("Reset site")
        self.reset_btn.clicked.connect(self._setup_default_site)
        right_panel.addWidget(self.reset_btn)

        log_group = QGroupBox("Log")
        log_layout = QVBoxLayout()
        self.log_text = QTextEdit()
        self.log_text.setReadOnly(True)
        self.log_text.setMaximumHeight(200)
        log_layout.addWidget(self.log_text)
        log_group.setLayout(log_layout)
        right_panel.addWidget(log_group)

    @staticmethod
    def _spin(low: int, high: int, value: int) -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(low, high)
        spin.setValue(value)
        return spin

    def _log(self, msg: str):
        self.log_text.append(msg)

    def _start(self) -> Coord:
        return (self.start_x_spin.value(), self.start_y_spin.value())

    def _goal(self) -> Coord:
        return (self.goal_x_spin.value(), self.goal_y_spin.value())

    def _setup_default_site(self):
        w = self.width_spin.value()
        h = self.height_spin.value()
        grid = Grid.create(w, h)
        if isinstance(grid, Fault):
            self._log(f"Site error: {grid.message}")
            return

        self.grid = grid
        self.result = None
        self._update_map()
        self._log(f"Site created: {w}x{h}, click cells to place obstacles")

    def _load_config(self):
        try:
            app_config = load_app_config(self.config_path)
            grid = build_grid(app_config.site)
        except (OSError, ValueError) as exc:
            self._log(f"Config error: {exc}")
            return

        for spin, value in (
            (self.width_spin, grid.width),
            (self.height_spin, grid.height),
            (self.start_x_spin, app_config.route.start[0]),
            (self.start_y_spin, app_config.route.start[1]),
            (self.goal_x_spin, app_config.route.goal[0]),
            (self.goal_y_spin, app_config.route.goal[1]),
        ):
            spin.blockSignals(True)
            spin.setValue(value)
            spin.blockSignals(False)

        self.grid = grid
        self.result = None
        self._update_map()
        self._log(f"Loaded {self.config_path.name}: {len(grid.obstacles)} obstacles")

    def _mark_cell(self, pos: Coord):
        if self.grid is None:
            return
        marked = self.grid.mark_obstacle(pos)
        self.result = None
        self._update_map()
        self._log(f"Obstacle {pos}: {marked.message}")

    def _find_path(self):
        if self.grid is None:
            return

        config = EngineConfig(max_expansions=self.max_expansions_spin.value())
        self.result = self.grid.find_optimal_path(self._start(), self._goal(), config)

        self.outcome_label.setText(f"Outcome: {self.result.outcome.value}")
        self.cost_label.setText(f"Cost: {self.result.cost if self.result.cost is not None else '-'}")
        self.expansions_label.setText(f"Expansions: {self.result.expansions}")
        self._update_map()

        message = f" ({self.result.message})" if self.result.message else ""
        self._log(
            f"{self._start()} -> {self._goal()}: {self.result.outcome.value}{message}, "
            f"steps={self.result.steps}"
        )

    def _update_map(self):
        if self.grid is not None:
            self.map_widget.set_site(self.grid, self._start(), self._goal(), self.result)


def main():
    app = QApplication(sys.argv)
    window = RouteGUI()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
