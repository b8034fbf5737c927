from __future__ import annotations

from abc import ABC, abstractmethod

from ..core.constants import DISCREPANCY_THRESHOLD_MINUTES
from ..core.enums import DiscrepancyKind
from ..summary.model import DailySummary


class DiscrepancyClassifier(ABC):
    """Strategy for labelling a user-day summary."""

    @abstractmethod
    def classify(self, summary: DailySummary) -> DiscrepancyKind:
        raise NotImplementedError


class ThresholdDiscrepancyClassifier(DiscrepancyClassifier):
    """Signed difference beyond the threshold is EXCESSIVE or LOW.

    Inside the threshold a day is still an ISSUE when the user was present but
    reported nothing usable (no segments, or only unfinished ones).
    Existing issue clears play no part here.
    """

    def __init__(self, threshold_minutes: int = DISCREPANCY_THRESHOLD_MINUTES):
        self._threshold = int(threshold_minutes)

    @property
    def threshold_minutes(self) -> int:
        return self._threshold

    def classify(self, summary: DailySummary) -> DiscrepancyKind:
        diff = summary.difference_minutes
        if diff > self._threshold:
            return DiscrepancyKind.EXCESSIVE
        if diff < -self._threshold:
            return DiscrepancyKind.LOW
        if summary.has_attendance and (not summary.segments or summary.open_segments == len(summary.segments)):
            return DiscrepancyKind.ISSUE
        return DiscrepancyKind.NONE
