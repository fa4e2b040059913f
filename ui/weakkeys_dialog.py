# ui/weakkeys_dialog.py
from PySide6.QtWidgets import (
    QDialog,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QSpinBox,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QFileDialog,
    QMessageBox,
)
import csv
import pyqtgraph as pg


class MistakesDialog(QDialog):
    def __init__(self, mistakes_ranked, parent=None):
        """
        mistakes_ranked: iterable of (key, count), most frequent first
        """
        super().__init__(parent)
        self.setWindowTitle("Mistakes")
        self.resize(680, 520)
        self._raw = list(mistakes_ranked)
        self._filtered = self._raw[:]

        root = QVBoxLayout(self)

        # --- controls ---
        ctrl = QHBoxLayout()
        ctrl.addWidget(QLabel("Min count:"))
        self.min_count = QSpinBox()
        self.min_count.setRange(1, 9999)
        self.min_count.setValue(1)
        self.min_count.valueChanged.connect(self._apply_filter)
        ctrl.addWidget(self.min_count)
        ctrl.addStretch(1)
        self.btn_export = QPushButton("Export CSV…")
        self.btn_export.clicked.connect(self._export_csv)
        self.btn_export.setEnabled(bool(self._raw))
        ctrl.addWidget(self.btn_export)
        root.addLayout(ctrl)

        # --- plot (single item, reused) ---
        self.plot = pg.PlotWidget()
        self.plot.setBackground(None)
        self.plot.showGrid(x=False, y=True, alpha=0.1)
        self.plot.setMenuEnabled(False)
        self.plot.setMouseEnabled(x=False, y=False)
        self.plot.hideButtons()
        self.plot.enableAutoRange("y", True)
        self.plot.setLabel("left", "First-attempt mistakes")
        root.addWidget(self.plot, stretch=2)

        self._bar = pg.BarGraphItem(x=[], height=[], width=0.8)
        self.plot.addItem(self._bar)

        # --- table ---
        self.table = QTableWidget(0, 2)
        self.table.setHorizontalHeaderLabels(["Character", "Mistakes"])
        self.table.horizontalHeader().setStretchLastSection(True)
        root.addWidget(self.table, stretch=1)

        self._render()

    def _apply_filter(self):
        min_count = self.min_count.value()
        self._filtered = [r for r in self._raw if r[1] >= min_count]
        self._render()

    def _render(self):
        keys = [r[0] for r in self._filtered]
        counts = [r[1] for r in self._filtered]
        self._bar.setOpts(x=list(range(len(keys))), height=counts, width=0.8)
        self.plot.getAxis("bottom").setTicks([[(i, k) for i, k in enumerate(keys)]])

        self.table.setRowCount(len(self._filtered))
        for i, (k, count) in enumerate(self._filtered):
            self.table.setItem(i, 0, QTableWidgetItem(k))
            self.table.setItem(i, 1, QTableWidgetItem(str(count)))

    def _export_csv(self):
        path, _ = QFileDialog.getSaveFileName(
            self, "Export Mistakes", "mistakes.csv", "CSV (*.csv)"
        )
        if not path:
            return
        try:
            with open(path, "w", newline="", encoding="utf-8") as f:
                w = csv.writer(f)
                w.writerow(["Character", "Mistakes"])
                for k, count in self._filtered:
                    w.writerow([k, count])
        except OSError as e:
            QMessageBox.warning(self, "Export Mistakes", str(e))
