# src/doseviz/ui/main_window.py
import logging
from datetime import timedelta

from PySide6.QtWidgets import QMainWindow, QWidget, QHBoxLayout, QStatusBar
from .controls import ControlsPanel, SimulateRequest
from .plots import PlotWidget
from doselevel.levels import (
    level_arrays, half_life_resolution, estimate_next_trough, estimate_steady_state_trough,
)
from doselevel.models.one_compartment import hours_between
from doselevel.metrics import cmax, tmax, auc_trapz, peak_to_trough_ratio

log = logging.getLogger(__name__)

class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Dose Level")
        self.resize(1100, 680)

        central = QWidget(self); self.setCentralWidget(central)
        root = QHBoxLayout(central)

        self.controls = ControlsPanel()
        self.plot = PlotWidget()
        root.addWidget(self.controls, 0)
        root.addWidget(self.plot, 1)

        self.status = QStatusBar(); self.setStatusBar(self.status)

        # wire events
        self.controls.simulateRequested.connect(self.on_simulate)

        # first run using current control values
        self.controls._emit_request()

    def on_simulate(self, req: SimulateRequest):
        try:
            # Extend past the last dose by one interval so the next trough is on screen
            end = req.start + timedelta(hours=req.t_end_h, days=req.interval_days)
            # Short half-lives need sub-hour steps or the curve is only dose spikes
            t, L = level_arrays(req.events, req.start, end, half_life_resolution(req.preset.half_life_h))
            self.plot.plot_curves({req.preset.name: (t, L)})

            ss = estimate_steady_state_trough(req.events[0].amount_mg, req.interval_days,
                                              req.preset.half_life_h)
            self.plot.mark_level(ss, f"steady-state trough {ss:.3f} mg")

            trough = estimate_next_trough(req.events)
            if trough is not None:
                self.plot.mark_point(hours_between(req.start, trough.timestamp),
                                     trough.level_mg, "next trough")

            msg = (f"Peak {cmax(L):.3f} mg at {tmax(t, L):.1f} h | AUC {auc_trapz(t, L):.1f} mg*h | "
                   f"PTR {peak_to_trough_ratio(t, L, interval_h=req.interval_days * 24):.2f}")
            self.status.showMessage(msg, 5000)
        except Exception as e:
            log.exception("simulation failed")
            self.status.showMessage(f"Error: {e}", 8000)
