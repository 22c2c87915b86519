from dataclasses import dataclass
from enum import StrEnum


class DetectionMethod(StrEnum):
    AUTO = "auto"
    MANUAL = "manual"


@dataclass(frozen=True)
class ImpactDetectionResult:
    impact_frame: int
    confidence: float
    method: DetectionMethod


@dataclass(frozen=True)
class TrimRange:
    start_frame: int
    end_frame: int

    @property
    def frame_count(self) -> int:
        return self.end_frame - self.start_frame + 1
