# src/doseviz/ui/plots.py
from PySide6.QtWidgets import QWidget, QVBoxLayout
import pyqtgraph as pg


class PlotWidget(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)

        # Main plot area
        self.plot_widget = pg.PlotWidget()
        self.plot_widget.setLabel("left", "Estimated level", units="mg")
        self.plot_widget.setLabel("bottom", "Time", units="h")
        self.plot_widget.showGrid(x=True, y=True, alpha=0.3)
        self.plot_widget.addLegend()
        layout.addWidget(self.plot_widget)

    def plot_curves(self, results: dict[str, tuple]):
        self.plot_widget.clear()
        for label, (t, L) in results.items():
            self.plot_widget.plot(
                t, L,
                pen=pg.mkPen(width=2),
                name=label
            )

    def mark_level(self, y: float, label: str):
        """Horizontal dashed reference line, e.g. the steady-state trough."""
        line = pg.InfiniteLine(pos=y, angle=0,
                               pen=pg.mkPen(width=1, style=pg.QtCore.Qt.PenStyle.DashLine),
                               label=label)
        self.plot_widget.addItem(line)

    def mark_point(self, x: float, y: float, label: str):
        scatter = pg.ScatterPlotItem([x], [y], size=9, symbol="o", name=label)
        self.plot_widget.addItem(scatter)
