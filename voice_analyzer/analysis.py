"""Analysis records: classification plus spectrum for one piece of audio."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

import numpy as np

from voice_analyzer.audio import average_volume, duration_seconds, load_audio
from voice_analyzer.classifier import (
    LABELS, ClassificationResult, ClassifierConfig, InvalidArgumentError, classify,
)
from voice_analyzer.spectrum import DEFAULT_BANDS, frequency_bands


logger = logging.getLogger(__name__)

SOURCES = ("recording", "upload")


@dataclass
class AnalysisRecord:
    """Everything shown and stored for one analyzed clip."""
    id: str
    timestamp: int                      # ms since epoch
    source: str
    duration: float                     # seconds
    sample_rate: int
    classification: ClassificationResult
    frequency_data: list[float] = field(default_factory=list)
    file_name: str | None = None
    average_volume: float = 0.0         # RMS level, 0-100

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase keys of the session file format."""
        data: dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "source": self.source,
            "duration": self.duration,
            "averageVolume": self.average_volume,
            "sampleRate": self.sample_rate,
            "frequencyData": list(self.frequency_data),
            "genderDetection": {
                "gender": self.classification.label,
                "confidence": self.classification.confidence,
                "fundamentalFreq": self.classification.fundamental_frequency_hz,
            },
        }
        if self.file_name is not None:
            data["fileName"] = self.file_name
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisRecord:
        detection = data.get("genderDetection", {})
        label = detection.get("gender", "unknown")
        if label not in LABELS:
            raise ValueError(f"Unknown gender label: {label!r}")
        return cls(
            id=str(data["id"]),
            timestamp=int(data["timestamp"]),
            source=data.get("source", "recording"),
            duration=float(data.get("duration", 0.0)),
            sample_rate=int(data.get("sampleRate", 0)),
            classification=ClassificationResult(
                label=label,
                confidence=float(detection.get("confidence", 0.0)),
                fundamental_frequency_hz=float(detection.get("fundamentalFreq", 0.0)),
            ),
            frequency_data=[float(v) for v in data.get("frequencyData", [])],
            file_name=data.get("fileName"),
            average_volume=float(data.get("averageVolume", 0.0)),
        )


def analyze_samples(
    samples: Sequence[float] | np.ndarray,
    sample_rate: int,
    source: str = "upload",
    file_name: str | None = None,
    timestamp: int | None = None,
    config: ClassifierConfig | None = None,
    n_bands: int = DEFAULT_BANDS,
) -> AnalysisRecord:
    """Classify *samples* and compute their spectrum bands.

    The record id is the millisecond timestamp as a string.
    """
    if source not in SOURCES:
        raise InvalidArgumentError(f"Source must be one of {SOURCES}, got {source!r}")
    if sample_rate <= 0:
        raise InvalidArgumentError(f"Sample rate must be positive, got {sample_rate}")

    if timestamp is None:
        timestamp = int(time.time() * 1000)

    classification = classify(samples, sample_rate, config)
    bands = frequency_bands(samples, sample_rate, n_bands)
    record = AnalysisRecord(
        id=str(timestamp),
        timestamp=timestamp,
        source=source,
        duration=duration_seconds(samples, sample_rate),
        sample_rate=sample_rate,
        classification=classification,
        frequency_data=bands,
        file_name=file_name,
        average_volume=average_volume(samples),
    )
    logger.info(
        "Analyzed %s: %s (%.0f%%) at %.1f Hz",
        file_name or source, classification.label,
        classification.confidence * 100, classification.fundamental_frequency_hz,
    )
    return record


def analyze_file(
    audio_path: str | Path,
    target_sr: int | None = None,
    timestamp: int | None = None,
    config: ClassifierConfig | None = None,
) -> AnalysisRecord:
    """Load an uploaded audio file and analyze its first channel."""
    audio_path = Path(audio_path)
    samples, sr = load_audio(audio_path, target_sr=target_sr)
    return analyze_samples(
        samples, sr,
        source="upload",
        file_name=audio_path.name,
        timestamp=timestamp,
        config=config,
    )
