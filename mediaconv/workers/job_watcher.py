# mediaconv/workers/job_watcher.py
from PySide6.QtCore import QObject, QTimer, Signal

from ..core import MediaConverter
from ..models.errors import SupervisorError
from ..models.job import JobState


class JobWatcher(QObject):
    """Polls liveness on a timer and says once how the job ended."""
    finished = Signal(str)   # JobState value: "completed" or "stopped"
    error = Signal(str)

    def __init__(self, core: MediaConverter, interval_ms: int | None = None, parent=None):
        super().__init__(parent)
        self.core = core
        self.timer = QTimer(self)
        self.timer.setInterval(int(interval_ms or core.settings.get("poll_interval_ms", 1000)))
        self.timer.timeout.connect(self._poll)

    def start(self):
        self.timer.start()

    def request_stop(self):
        try:
            self.core.request_stop()
        except SupervisorError as e:
            self.error.emit(str(e))

    def _poll(self):
        try:
            active = self.core.poll_liveness()
        except SupervisorError as e:
            self.timer.stop()
            self.error.emit(str(e))
            return
        if not active and self.core.state in (JobState.COMPLETED, JobState.STOPPED):
            self.timer.stop()
            self.finished.emit(self.core.state.value)
