from typing import Iterable, Tuple
import pyqtgraph as pg

from app.calculation import progress_series
from app.models import HistoryEntry

CPM_COLOR = "#3b82f6"
ERROR_COLOR = "#ef4444"


def setup_progress_plot(plot_widget: pg.PlotWidget) -> Tuple[pg.PlotDataItem, pg.PlotDataItem]:
    plot_widget.setBackground(None)
    plot_widget.showGrid(x=False, y=True, alpha=0.15)
    plot_widget.setMenuEnabled(False)
    plot_widget.setMouseEnabled(x=False, y=False)
    plot_widget.hideButtons()
    plot_widget.setAxisItems({"bottom": pg.DateAxisItem(orientation="bottom")})
    plot_widget.addLegend(offset=(10, 10))
    cpm = plot_widget.plot([], [], name="CPM", pen=pg.mkPen(CPM_COLOR, width=2.5),
                           symbol="o", symbolSize=5, symbolBrush=CPM_COLOR, antialias=True)
    err = plot_widget.plot([], [], name="Error %", pen=pg.mkPen(ERROR_COLOR, width=2.5),
                           symbol="o", symbolSize=5, symbolBrush=ERROR_COLOR, antialias=True)
    return cpm, err


def update_progress_curves(curves, entries: Iterable[HistoryEntry]):
    xs, cpm, err = progress_series(entries)
    cpm_curve, err_curve = curves
    cpm_curve.setData(xs, cpm)
    err_curve.setData(xs, err)
