"""Main window for the CartLab GUI."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QSignalBlocker, Qt, Slot
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QMainWindow,
    QMessageBox,
    QProgressBar,
    QPushButton,
    QSlider,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from ..config.runtime import LabConfig
from ..core.guidance import fit_interpretation, workflow_checklist
from ..core.playback import cart_displacement_m, live_readout, phase_label, visible_series
from ..core.session import LabSession
from ..core.store import LabState
from ..physics.model import TRACK_LENGTH_M, get_scenario_config
from ..physics.presets import HANGING_MASS_STEPS_KG, SCENARIOS, available_presets, scenario_title
from ..tools.debug import debug_enabled, log_timing_summary
from .playback_driver import PlaybackDriver
from .widgets import FitPlotWidget, TimeSeriesPlotWidget

_SLIDER_STEPS = 1000
_TABLE_HEADERS = (
    "Trial",
    "Scenario",
    "Mass (kg)",
    "Ft mean (N)",
    "a (m/s^2)",
    "Ft window (s)",
    "v window (s)",
    "",
)


def _fmt(value: float | None, digits: int = 3) -> str:
    return "--" if value is None else f"{value:.{digits}f}"


class MainWindow(QMainWindow):
    """Controls, live graphs, the trial table and the fit view in one window."""

    def __init__(self, config: LabConfig | None = None, session: LabSession | None = None) -> None:
        super().__init__()
        self.setWindowTitle("Newton's 2nd Law Cart Lab")

        self._config = config or LabConfig()
        self._session = session or LabSession(config=self._config)
        self._logger = logging.getLogger(__name__)
        self._time_s = 0.0
        self._rendered_records: tuple = ()

        self._playback = PlaybackDriver(self._config.frame_interval_ms(), parent=self)
        self._playback.timeChanged.connect(self._on_time_changed)
        self._playback.playingChanged.connect(self._on_playing_changed)

        self._build_ui()
        self._unsubscribe = self._session.store.subscribe(self._on_state_changed)
        self._on_state_changed(self._session.state)

    def closeEvent(self, event: QCloseEvent) -> None:
        self._playback.pause()
        self._unsubscribe()
        if debug_enabled():
            log_timing_summary()
        super().closeEvent(event)

    # ------------------------------------------------------------------ layout
    def _build_ui(self) -> None:
        container = QWidget()
        root = QHBoxLayout(container)
        root.addWidget(self._build_controls(), 0)
        root.addLayout(self._build_graphs(), 1)
        root.addLayout(self._build_results(), 1)
        self.setCentralWidget(container)
        self.statusBar().showMessage("Choose settings and click Run Trial.")

    def _build_controls(self) -> QWidget:
        box = QGroupBox(self.tr("Setup"))
        layout = QVBoxLayout(box)
        form = QFormLayout()

        self.scenario_combo = QComboBox()
        for scenario in SCENARIOS:
            self.scenario_combo.addItem(scenario_title(scenario), scenario)
        self.scenario_combo.currentIndexChanged.connect(self._on_scenario_changed)
        form.addRow(self.tr("Scenario"), self.scenario_combo)

        self.preset_combo = QComboBox()
        self.preset_combo.currentIndexChanged.connect(self._on_preset_changed)
        form.addRow(self.tr("Friction preset"), self.preset_combo)

        self.mass_combo = QComboBox()
        for mass in HANGING_MASS_STEPS_KG:
            self.mass_combo.addItem(f"{mass:.1f} kg", mass)
        self.mass_combo.currentIndexChanged.connect(self._on_mass_changed)
        form.addRow(self.tr("Hanging mass"), self.mass_combo)

        self.noise_check = QCheckBox(self.tr("Sensor noise"))
        self.noise_check.toggled.connect(self._session.set_noise)
        form.addRow(self.noise_check)

        self.fbd_check = QCheckBox(self.tr("Show forces"))
        self.fbd_check.toggled.connect(self._session.set_show_fbd)
        form.addRow(self.fbd_check)
        layout.addLayout(form)

        self.preset_details = QLabel()
        self.preset_details.setWordWrap(True)
        layout.addWidget(self.preset_details)

        self.run_button = QPushButton(self.tr("Run Trial"))
        self.run_button.clicked.connect(self._on_run_clicked)
        layout.addWidget(self.run_button)

        self.play_button = QPushButton(self.tr("Play"))
        self.play_button.clicked.connect(self._playback.toggle)
        layout.addWidget(self.play_button)

        self.time_slider = QSlider(Qt.Horizontal)
        self.time_slider.setRange(0, _SLIDER_STEPS)
        self.time_slider.sliderMoved.connect(self._on_slider_moved)
        layout.addWidget(self.time_slider)

        self.time_label = QLabel("t = 0.00 s")
        self.live_label = QLabel()
        self.phase_label = QLabel()
        layout.addWidget(self.time_label)
        layout.addWidget(self.live_label)
        layout.addWidget(self.phase_label)

        self.cart_progress = QProgressBar()
        self.cart_progress.setRange(0, 1000)
        self.cart_progress.setFormat("Cart position %p%")
        layout.addWidget(self.cart_progress)

        self.fbd_label = QLabel()
        self.fbd_label.setWordWrap(True)
        layout.addWidget(self.fbd_label)

        self.trial_summary = QLabel()
        self.trial_summary.setWordWrap(True)
        layout.addWidget(self.trial_summary)
        layout.addStretch(1)
        return box

    def _build_graphs(self) -> QVBoxLayout:
        layout = QVBoxLayout()
        self.force_plot = TimeSeriesPlotWidget("Tension (Ft) vs Time", "Ft (N)", config=self._config)
        self.velocity_plot = TimeSeriesPlotWidget(
            "Velocity vs Time", "Velocity (m/s)", config=self._config
        )
        self.force_plot.selectionChanged.connect(self._session.update_force_window)
        self.velocity_plot.selectionChanged.connect(self._session.update_velocity_window)
        layout.addWidget(self.force_plot, 1)
        layout.addWidget(self.velocity_plot, 1)

        hint = QLabel(
            self.tr("Drag to select a window. Arrow keys move the end, Shift+Arrow the start, Alt for fine steps.")
        )
        hint.setWordWrap(True)
        layout.addWidget(hint)

        self.force_value = QLabel()
        self.accel_value = QLabel()
        layout.addWidget(self.force_value)
        layout.addWidget(self.accel_value)
        return layout

    def _build_results(self) -> QVBoxLayout:
        layout = QVBoxLayout()

        buttons = QHBoxLayout()
        self.add_button = QPushButton(self.tr("Add Trial"))
        self.add_button.clicked.connect(self._on_add_clicked)
        self.clear_button = QPushButton(self.tr("Clear Trials"))
        self.clear_button.clicked.connect(self._on_clear_clicked)
        self.export_csv_button = QPushButton(self.tr("Export CSV"))
        self.export_csv_button.clicked.connect(self._on_export_csv_clicked)
        self.export_png_button = QPushButton(self.tr("Export PNG"))
        self.export_png_button.clicked.connect(self._on_export_png_clicked)
        for button in (self.add_button, self.clear_button, self.export_csv_button, self.export_png_button):
            buttons.addWidget(button)
        layout.addLayout(buttons)

        self.table = QTableWidget(0, len(_TABLE_HEADERS))
        self.table.setHorizontalHeaderLabels(list(_TABLE_HEADERS))
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeToContents)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        layout.addWidget(self.table, 1)

        self.fit_plot = FitPlotWidget()
        layout.addWidget(self.fit_plot, 1)
        self.fit_equation = QLabel()
        self.fit_equation.setWordWrap(True)
        self.fit_quality = QLabel()
        layout.addWidget(self.fit_equation)
        layout.addWidget(self.fit_quality)

        self.fit_hints = QLabel()
        self.fit_hints.setWordWrap(True)
        layout.addWidget(self.fit_hints)

        checklist_box = QGroupBox(self.tr("Workflow"))
        checklist_layout = QVBoxLayout(checklist_box)
        self.checklist_label = QLabel()
        checklist_layout.addWidget(self.checklist_label)
        layout.addWidget(checklist_box)
        return layout

    # ------------------------------------------------------------------ render
    def _on_state_changed(self, state: LabState) -> None:
        self._sync_controls(state)
        self._render_preset_details(state)
        self._render_trial_summary(state)
        self._render_progress(state)
        self._render_measurement(state)
        if state.trial_records is not self._rendered_records:
            self._render_table(state)
        self._render_fit(state)
        self._render_checklist(state)
        self._update_buttons()

    def _sync_controls(self, state: LabState) -> None:
        with QSignalBlocker(self.scenario_combo):
            self.scenario_combo.setCurrentIndex(self.scenario_combo.findData(state.scenario))

        options = available_presets(state.scenario)
        with QSignalBlocker(self.preset_combo):
            if [self.preset_combo.itemData(i) for i in range(self.preset_combo.count())] != [
                p.id for p in options
            ]:
                self.preset_combo.clear()
                fixed = state.scenario == "cart_only"
                for preset in options:
                    label = f"{preset.label} (fixed)" if fixed else preset.label
                    self.preset_combo.addItem(label, preset.id)
            self.preset_combo.setCurrentIndex(self.preset_combo.findData(state.preset_id))
            self.preset_combo.setEnabled(state.scenario != "cart_only")

        with QSignalBlocker(self.mass_combo):
            idx = self.mass_combo.findData(state.hanging_mass_kg)
            if idx >= 0:
                self.mass_combo.setCurrentIndex(idx)
        with QSignalBlocker(self.noise_check):
            self.noise_check.setChecked(state.noise_enabled)
        with QSignalBlocker(self.fbd_check):
            self.fbd_check.setChecked(state.show_fbd)

    def _render_preset_details(self, state: LabState) -> None:
        cfg = get_scenario_config(state.scenario, state.preset_id)
        self.preset_details.setText(
            "\n".join(
                [
                    f"Scenario: {cfg.scenario_label}",
                    f"Preset: {cfg.preset_label}",
                    f"Cart mass: {cfg.cart_mass_kg:.2f} kg",
                    f"Pad mass: {cfg.pad_mass_kg:.2f} kg",
                    f"System mass: {cfg.system_mass_kg:.2f} kg",
                    f"Moving drag: {cfg.drag_n:.2f} N",
                    f"Start threshold: {cfg.start_threshold_n:.2f} N",
                ]
            )
        )

    def _render_trial_summary(self, state: LabState) -> None:
        trial = state.current_trial
        if trial is None:
            self.trial_summary.setText("No trial yet. Choose settings and click Run Trial.")
            self.fbd_label.setVisible(False)
            return
        physics = trial.physics
        accel = f"{physics.acceleration_mps2:.3f} m/s^2" if physics.moved else "N/A"
        self.trial_summary.setText(
            "\n".join(
                [
                    f"Trial ID: {trial.id}",
                    f"Hanging mass: {physics.hanging_mass_kg:.2f} kg",
                    f"Pulling force: {physics.pulling_force_n:.2f} N",
                    f"Moved: {'Yes' if physics.moved else 'No'}",
                    f"Model acceleration: {accel}",
                    f"Model tension: {physics.tension_n:.3f} N",
                ]
            )
        )
        self.fbd_label.setVisible(state.show_fbd)
        if state.show_fbd and physics.config is not None:
            self.fbd_label.setText(
                f"Weight of hanging mass: {physics.pulling_force_n:.2f} N\n"
                f"Tension: {physics.tension_n:.2f} N\n"
                f"Friction/drag: {physics.config.drag_n:.2f} N"
            )

    def _render_progress(self, state: LabState) -> None:
        trial = state.current_trial
        force_sel = state.measurement.force_window
        vel_sel = state.measurement.velocity_window
        if trial is None:
            self.force_plot.clear_series(force_sel)
            self.velocity_plot.clear_series(vel_sel)
            self.phase_label.setText("")
            self.live_label.setText("")
            self.cart_progress.setValue(0)
            return

        view = visible_series(trial.signals, self._time_s)
        self.force_plot.set_series(view.times_s, view.force_n, view.motion_window, force_sel)
        self.velocity_plot.set_series(view.times_s, view.velocity_mps, view.motion_window, vel_sel)

        self.time_label.setText(f"t = {self._time_s:.2f} s")
        self.live_label.setText(live_readout(trial.signals, self._time_s))
        self.phase_label.setText(phase_label(trial.physics, trial.signals, self._time_s))
        x = cart_displacement_m(trial.physics, trial.signals, self._time_s)
        self.cart_progress.setValue(int(round(1000 * min(1.0, x / TRACK_LENGTH_M))))

        duration = trial.signals.duration_s or 1.0
        with QSignalBlocker(self.time_slider):
            self.time_slider.setValue(int(round(_SLIDER_STEPS * self._time_s / duration)))

    def _render_measurement(self, state: LabState) -> None:
        m = state.measurement
        self.force_value.setText(f"Mean Force of Tension: {_fmt(m.force_mean_n)} N")
        self.accel_value.setText(f"Acceleration (slope): {_fmt(m.acceleration_mps2)} m/s^2")

    def _render_table(self, state: LabState) -> None:
        records = state.trial_records
        self._rendered_records = records
        self.table.setRowCount(len(records))
        for row, record in enumerate(records):
            cells = (
                str(record.trial_id),
                scenario_title(record.scenario),
                f"{record.hanging_mass_kg:.2f}",
                f"{record.force_mean_n:.3f}",
                f"{record.accel_mps2:.3f}",
                f"{record.force_window_start_s:.2f} - {record.force_window_end_s:.2f}",
                f"{record.vel_window_start_s:.2f} - {record.vel_window_end_s:.2f}",
            )
            for col, text in enumerate(cells):
                self.table.setItem(row, col, QTableWidgetItem(text))
            remove = QPushButton(self.tr("Remove"))
            remove.clicked.connect(lambda _checked=False, tid=record.trial_id: self._on_remove_clicked(tid))
            self.table.setCellWidget(row, len(cells), remove)

    def _render_fit(self, state: LabState) -> None:
        view = self._session.current_fit()
        self.fit_plot.set_fit(view)
        self.fit_hints.setText("\n".join(f"- {hint}" for hint in fit_interpretation(view)))
        fit = view.fit
        if fit is None:
            self.fit_equation.setText(
                f"Need at least 2 accepted {scenario_title(state.scenario)} trials for a linear fit."
            )
            self.fit_quality.setText("R^2: --")
            return
        self.fit_equation.setText(
            f"Force of Tension, Ft = ({fit.slope:.3f} N/m/s^2)·a + ({fit.intercept:.3f} N)"
        )
        self.fit_quality.setText(f"R^2 = {fit.r2:.4f} with {fit.count} points")

    def _render_checklist(self, state: LabState) -> None:
        lines = [
            f"{item.label}: {'Done' if item.done else 'Pending'}"
            for item in workflow_checklist(state)
        ]
        self.checklist_label.setText("\n".join(lines))

    def _update_buttons(self) -> None:
        state = self._session.state
        has_records = bool(state.trial_records)
        self.add_button.setEnabled(self._session.can_accept_trial())
        self.clear_button.setEnabled(has_records)
        self.export_csv_button.setEnabled(has_records)
        self.export_png_button.setEnabled(state.current_trial is not None)
        self.play_button.setEnabled(state.current_trial is not None)
        self.time_slider.setEnabled(state.current_trial is not None)

    # ------------------------------------------------------------------ slots
    @Slot(int)
    def _on_scenario_changed(self, index: int) -> None:
        self._session.select_scenario(self.scenario_combo.itemData(index))

    @Slot(int)
    def _on_preset_changed(self, index: int) -> None:
        preset_id = self.preset_combo.itemData(index)
        if preset_id:
            self._session.select_preset(preset_id)

    @Slot(int)
    def _on_mass_changed(self, index: int) -> None:
        self._session.set_hanging_mass(self.mass_combo.itemData(index))

    @Slot()
    def _on_run_clicked(self) -> None:
        self._time_s = 0.0
        trial = self._session.run_trial()
        self._playback.reset(trial.signals.duration_s)
        self._playback.play(restart=True)
        if trial.physics.moved:
            self.statusBar().showMessage(
                f"Trial {trial.id} ready. Let it play, then select windows on both graphs."
            )
        else:
            threshold = trial.physics.config.start_threshold_n if trial.physics.config else 0.0
            self.statusBar().showMessage(
                f"Trial {trial.id}: hanging force ({trial.physics.pulling_force_n:.2f} N) is below "
                f"start threshold ({threshold:.2f} N). Do not add this trial."
            )

    @Slot(float)
    def _on_time_changed(self, time_s: float) -> None:
        self._time_s = time_s
        self._render_progress(self._session.state)

    @Slot(bool)
    def _on_playing_changed(self, playing: bool) -> None:
        self.play_button.setText(self.tr("Pause") if playing else self.tr("Play"))

    @Slot(int)
    def _on_slider_moved(self, value: int) -> None:
        trial = self._session.state.current_trial
        if trial is None:
            return
        self._playback.seek(trial.signals.duration_s * value / _SLIDER_STEPS)

    @Slot()
    def _on_add_clicked(self) -> None:
        record = self._session.accept_trial()
        if record is None:
            self.statusBar().showMessage("Select valid windows on both graphs before adding the trial.")
            return
        self.statusBar().showMessage(
            "Trial added. Keep going to build your Force-of-Tension-vs-acceleration trend line."
        )

    @Slot()
    def _on_clear_clicked(self) -> None:
        self._session.clear_trials()
        self.statusBar().showMessage("Cleared recorded trials.")

    def _on_remove_clicked(self, trial_id: int) -> None:
        self._session.remove_trial(trial_id)
        self.statusBar().showMessage(f"Removed trial {trial_id}.")

    @Slot()
    def _on_export_csv_clicked(self) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self, self.tr("Export CSV"), "trial_data.csv", "CSV files (*.csv)"
        )
        if not path:
            return
        try:
            target = self._session.export_csv(Path(path))
        except OSError as exc:
            self._logger.exception("CSV export failed")
            QMessageBox.critical(self, self.tr("Export failed"), str(exc))
            return
        if target is None:
            QMessageBox.information(
                self, self.tr("No data"), "No data yet. Add at least one trial before exporting CSV."
            )
            return
        self.statusBar().showMessage("CSV export complete.")

    @Slot()
    def _on_export_png_clicked(self) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self, self.tr("Export PNG"), "graphs_snapshot.png", "PNG images (*.png)"
        )
        if not path:
            return
        try:
            target = self._session.export_snapshot(Path(path))
        except (OSError, ValueError) as exc:
            self._logger.exception("Snapshot export failed")
            QMessageBox.critical(self, self.tr("Export failed"), str(exc))
            return
        if target is None:
            QMessageBox.information(
                self, self.tr("No trial"), "Run a trial first so there is graph data to export."
            )
            return
        self.statusBar().showMessage("Graph snapshot export complete.")

