# mediaconv/workers/scan_worker.py
from PySide6.QtCore import QObject, Signal

from ..core import MediaConverter


class ScanWorker(QObject):
    scanned = Signal(object, object)  # list[Node], list[PathProcessingError]

    def __init__(self, core: MediaConverter):
        super().__init__()
        self.core = core

    def scan(self, paths):
        nodes = self.core.scan(list(paths))
        self.scanned.emit(nodes, list(self.core.scan_errors))
