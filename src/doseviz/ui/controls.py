# src/doseviz/ui/controls.py
from dataclasses import dataclass
from datetime import datetime
from PySide6.QtCore import Signal
from PySide6.QtWidgets import QVBoxLayout, QPushButton, QDoubleSpinBox, QSpinBox, QComboBox, QFrame, QLabel

from doselevel import config
from doselevel.types import PeptidePreset
from doselevel.presets import PEPTIDE_PRESETS, format_half_life
from doselevel.dosing import fixed_every_n_days
from doselevel.reconstitution import from_preset

@dataclass
class SimulateRequest:
    preset: PeptidePreset
    events: tuple
    start: datetime
    interval_days: int
    t_end_h: float

class ControlsPanel(QFrame):
    simulateRequested = Signal(SimulateRequest)

    def __init__(self):
        super().__init__()
        self.setFrameShape(QFrame.StyledPanel)
        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Controls"))

        # --- Compound ---
        self.preset = QComboBox(); self.preset.addItems([p.name for p in PEPTIDE_PRESETS])
        layout.addWidget(QLabel("Compound"))
        layout.addWidget(self.preset)
        self.lbl_half_life = QLabel()
        layout.addWidget(self.lbl_half_life)

        # --- Dosing ---
        layout.addWidget(QLabel("Dosing"))
        self.dose = QDoubleSpinBox(); self.dose.setDecimals(3); self.dose.setRange(0.001, 1000)
        self.dose.setSuffix(" mg")
        layout.addWidget(QLabel("Dose (mg)"))
        layout.addWidget(self.dose)

        self.interval = QSpinBox(); self.interval.setRange(1, 60); self.interval.setValue(7)
        self.interval.setSuffix(" days")
        layout.addWidget(QLabel("Interval (days)"))
        layout.addWidget(self.interval)

        self.weeks = QSpinBox(); self.weeks.setRange(1, 104); self.weeks.setValue(config.DEFAULT_WEEKS)
        self.weeks.setSuffix(" weeks")
        layout.addWidget(QLabel("Duration (weeks)"))
        layout.addWidget(self.weeks)

        # --- Reconstitution ---
        layout.addWidget(QLabel("Reconstitution"))
        self.vial = QDoubleSpinBox(); self.vial.setRange(0.1, 1000); self.vial.setSuffix(" mg")
        layout.addWidget(QLabel("Peptide in vial (mg)"))
        layout.addWidget(self.vial)

        self.water = QDoubleSpinBox(); self.water.setRange(0.1, 100); self.water.setSuffix(" mL")
        layout.addWidget(QLabel("Bacteriostatic water (mL)"))
        layout.addWidget(self.water)

        self.lbl_draw = QLabel()
        layout.addWidget(self.lbl_draw)

        self.preset.currentIndexChanged.connect(self._apply_preset)
        self.dose.valueChanged.connect(self._update_draw)
        self.vial.valueChanged.connect(self._update_draw)
        self.water.valueChanged.connect(self._update_draw)
        self._apply_preset()

        go = QPushButton("Simulate"); layout.addWidget(go)
        go.clicked.connect(self._emit_request)

    def current_preset(self) -> PeptidePreset:
        return PEPTIDE_PRESETS[self.preset.currentIndex()]

    def _apply_preset(self):
        p = self.current_preset()
        self.lbl_half_life.setText(f"Half-life: {format_half_life(p.half_life_h)}")
        self.dose.setValue(p.typical_dose_mg)
        self.vial.setValue(p.vial_mg)
        self.water.setValue(p.water_ml)
        self._update_draw()

    def _update_draw(self):
        p = self.current_preset()
        res = from_preset(
            PeptidePreset(p.name, float(self.vial.value()), float(self.water.value()),
                          float(self.dose.value()) * 1000.0, p.half_life_h)
        )
        if res is None:
            self.lbl_draw.setText("Draw: enter positive values")
        else:
            self.lbl_draw.setText(f"Draw {res.draw_volume_ml:.3f} mL = {res.syringe_units:.1f} units "
                                  f"({res.concentration_mg_per_ml:.2f} mg/mL)")

    def _emit_request(self):
        p = self.current_preset()
        start = datetime.now().replace(minute=0, second=0, microsecond=0)
        weeks = int(self.weeks.value())
        events = fixed_every_n_days(amount_mg=float(self.dose.value()),
                                    every_days=int(self.interval.value()),
                                    weeks=weeks, start=start,
                                    half_life_h=p.half_life_h, drug_id=p.name)
        req = SimulateRequest(preset=p, events=events, start=start,
                              interval_days=int(self.interval.value()),
                              t_end_h=weeks * 7 * 24)
        self.simulateRequested.emit(req)
