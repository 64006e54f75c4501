"""
Background analysis.

Reading the claims file and matching run off the UI / event-loop thread in a
QThread, reporting back through signals.
"""

import logging
from typing import Any, Dict, Optional

from PySide6.QtCore import QThread, Signal

from denial_lens.loader.data_loader import load_dataset_text

from .session import AnalysisSession

logger = logging.getLogger(__name__)


class AnalysisWorker(QThread):
    """Worker thread that (re)loads the dataset and analyses one letter."""

    result_ready = Signal(object)  # AnalysisResult
    error = Signal(str)

    def __init__(
        self,
        session: AnalysisSession,
        fields: Dict[str, Any],
        dataset_path: Optional[str] = None,
        parent=None,
    ):
        """
        Initialize analysis worker.

        Args:
            session: Session whose dataset is used (and replaced when
                ``dataset_path`` is given).
            fields: Extracted letter fields to analyse.
            dataset_path: Claims file to load first; None keeps the session's
                current dataset.
        """
        super().__init__(parent)
        self.session = session
        self.fields = fields
        self.dataset_path = dataset_path

    def run(self):
        """Execute the analysis."""
        try:
            if self.isInterruptionRequested():
                return

            if self.dataset_path:
                text = load_dataset_text(self.dataset_path, self.session.settings.csv_encoding)
                if self.isInterruptionRequested():
                    return
                self.session.load_text(text)

            if self.isInterruptionRequested():
                return

            result = self.session.analyze(self.fields)

            if not self.isInterruptionRequested():
                self.result_ready.emit(result)

        except Exception as e:
            logger.exception("Analysis failed")
            if not self.isInterruptionRequested():
                self.error.emit(str(e))
