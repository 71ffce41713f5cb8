"""
main_desktop.py
PyQt5 control panel for the WiZ mood light
- Bulb IP, update interval, dimming and sample size
- Smooth transitions toggle
- Start/stop with a connection test before starting
- Current color preview and status line
"""
import sys

from PyQt5 import QtWidgets, QtGui, QtCore

from config import Config, DIMMING_RANGE, INTERVAL_MS_RANGE, STRIDE_RANGE
from session import MoodLightSession


class MainWindow(QtWidgets.QWidget):
    def __init__(self, config=None):
        super().__init__()
        self.config = config or Config()
        self.session = MoodLightSession(self.config)
        self.setWindowTitle("WiZ Mood Light Controller (UDP)")
        self.setFixedSize(400, 420)
        self.init_ui()
        # QTimer is the tick source here; ticks run on the GUI thread.
        self.timer = QtCore.QTimer()
        self.timer.timeout.connect(self.on_tick)

    def init_ui(self):
        layout = QtWidgets.QVBoxLayout(self)

        # Bulb settings
        bulb_box = QtWidgets.QGroupBox("WiZ Bulb")
        form = QtWidgets.QFormLayout()
        self.ip_edit = QtWidgets.QLineEdit(self.config.bulb_ip)
        form.addRow("IP address:", self.ip_edit)
        self.interval_spin = self._spin(INTERVAL_MS_RANGE, self.config.update_interval_ms, step=100)
        form.addRow("Update interval (ms):", self.interval_spin)
        self.dim_spin = self._spin(DIMMING_RANGE, self.config.dimming)
        form.addRow("Dim:", self.dim_spin)
        self.stride_spin = self._spin(STRIDE_RANGE, self.config.sample_stride)
        form.addRow("Sample size:", self.stride_spin)
        self.smooth_check = QtWidgets.QCheckBox("Smooth transitions")
        self.smooth_check.setChecked(self.config.smooth_transitions)
        form.addRow(self.smooth_check)
        bulb_box.setLayout(form)
        layout.addWidget(bulb_box)

        # Start / stop
        buttons = QtWidgets.QHBoxLayout()
        self.start_button = QtWidgets.QPushButton("Start Mood Lighting")
        self.start_button.setStyleSheet("background-color: lightgreen;")
        self.start_button.clicked.connect(self.handle_start)
        buttons.addWidget(self.start_button)
        self.stop_button = QtWidgets.QPushButton("Stop Mood Lighting")
        self.stop_button.setStyleSheet("background-color: lightcoral;")
        self.stop_button.setEnabled(False)
        self.stop_button.clicked.connect(self.handle_stop)
        buttons.addWidget(self.stop_button)
        layout.addLayout(buttons)

        # Color preview
        color_box = QtWidgets.QGroupBox("Current Color")
        color_layout = QtWidgets.QHBoxLayout()
        self.color_label = QtWidgets.QLabel()
        self.color_label.setFixedSize(60, 30)
        color_layout.addWidget(self.color_label)
        color_box.setLayout(color_layout)
        layout.addWidget(color_box)
        self.set_preview((0, 0, 0))

        # Status
        self.status_label = QtWidgets.QLabel("Ready")
        self.status_label.setWordWrap(True)
        self.status_label.setStyleSheet("color: blue;")
        layout.addWidget(self.status_label)

    @staticmethod
    def _spin(bounds, value, step=1):
        spin = QtWidgets.QSpinBox()
        spin.setRange(*bounds)
        spin.setSingleStep(step)
        spin.setValue(value)
        return spin

    def set_preview(self, rgb):
        pix = QtGui.QPixmap(60, 30)
        pix.fill(QtGui.QColor(*rgb))
        self.color_label.setPixmap(pix)

    def read_config(self):
        self.config.bulb_ip = self.ip_edit.text().strip()
        self.config.update_interval_ms = self.interval_spin.value()
        self.config.dimming = self.dim_spin.value()
        self.config.sample_stride = self.stride_spin.value()
        self.config.smooth_transitions = self.smooth_check.isChecked()

    def set_running_ui(self, running):
        self.start_button.setEnabled(not running)
        self.stop_button.setEnabled(running)
        self.ip_edit.setEnabled(not running)
        self.interval_spin.setEnabled(not running)
        self.smooth_check.setEnabled(not running)

    def handle_start(self):
        self.read_config()
        if not self.config.bulb_ip:
            QtWidgets.QMessageBox.warning(self, "Error", "Please enter the WiZ bulb IP address.")
            return
        self.status_label.setText("Testing connection to WiZ bulb...")
        QtWidgets.QApplication.processEvents()
        try:
            started = self.session.start()
        except ValueError as e:
            QtWidgets.QMessageBox.warning(self, "Invalid settings", str(e))
            self.status_label.setText("Invalid settings")
            return
        self.status_label.setText(self.session.status)
        if not started:
            QtWidgets.QMessageBox.critical(self, "Connection Error", self.session.status)
            return
        self.timer.start(self.config.update_interval_ms)
        self.set_running_ui(True)
        print(f"[GUI] Started, ticking every {self.config.update_interval_ms} ms")

    def handle_stop(self):
        self.timer.stop()
        self.session.stop()
        self.set_running_ui(False)
        self.status_label.setText(self.session.status)
        self.set_preview((0, 0, 0))

    def on_tick(self):
        # Dimming and stride stay live while running
        self.config.dimming = self.dim_spin.value()
        if self.session.sampler is not None:
            self.session.sampler.stride = self.stride_spin.value()
        try:
            result = self.session.tick()
        except Exception as e:
            self.status_label.setText(f"Error: {e}")
            return
        if result is not None and self.session.last_color is not None:
            self.set_preview(self.session.last_color)
        self.status_label.setText(self.session.status)
        if not self.session.running:
            self.timer.stop()
            self.set_running_ui(False)

    def closeEvent(self, event):
        self.timer.stop()
        if self.session.running:
            self.session.stop()
        super().closeEvent(event)


def main():
    app = QtWidgets.QApplication(sys.argv)
    win = MainWindow()
    win.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
