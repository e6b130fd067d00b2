"""Tests for voice_analyzer/analysis.py."""
from __future__ import annotations

import numpy as np
import pytest

from voice_analyzer.analysis import AnalysisRecord, analyze_file, analyze_samples
from voice_analyzer.classifier import ClassificationResult, InvalidArgumentError


class TestAnalyzeSamples:
    def test_record_fields(self, make_sine):
        record = analyze_samples(make_sine(200.0, 8000, n_samples=8000), 8000,
                                 source="recording", timestamp=1700000000000)
        assert record.id == "1700000000000"
        assert record.timestamp == 1700000000000
        assert record.source == "recording"
        assert record.duration == pytest.approx(1.0)
        assert record.sample_rate == 8000
        assert record.classification.label == "female"
        assert len(record.frequency_data) == 50
        assert record.file_name is None

    def test_average_volume_is_rms(self, make_sine):
        # RMS of a sine with amplitude 0.5 is 0.5 / sqrt(2)
        record = analyze_samples(make_sine(200.0, 8000, n_samples=8000), 8000, timestamp=1)
        assert record.average_volume == pytest.approx(50 / np.sqrt(2), rel=1e-3)

    def test_default_timestamp_is_now(self, make_sine):
        record = analyze_samples(make_sine(200.0, 8000), 8000)
        assert record.timestamp > 1_600_000_000_000
        assert record.id == str(record.timestamp)

    def test_silence(self):
        record = analyze_samples(np.zeros(4096), 8000, timestamp=1)
        assert record.classification == ClassificationResult("unknown", 0.0, 0.0)
        assert record.frequency_data == [0.0] * 50
        assert record.average_volume == 0.0

    def test_empty_buffer(self):
        record = analyze_samples([], 8000, timestamp=7)
        assert record.id == "7"
        assert record.duration == 0.0
        assert record.classification.label == "unknown"

    def test_invalid_source(self, make_sine):
        with pytest.raises(InvalidArgumentError, match="Source"):
            analyze_samples(make_sine(200.0, 8000), 8000, source="stream")

    def test_invalid_sample_rate(self):
        with pytest.raises(InvalidArgumentError):
            analyze_samples([], 0)


class TestAnalyzeFile:
    def test_upload_record(self, voice_200hz_wav):
        record = analyze_file(voice_200hz_wav, timestamp=42)
        assert record.id == "42"
        assert record.source == "upload"
        assert record.file_name == "voice_200hz.wav"
        assert record.sample_rate == 8000
        assert record.duration == pytest.approx(1.0)
        assert record.classification.label == "female"
        assert record.classification.fundamental_frequency_hz == pytest.approx(200.0)

    def test_stereo_uses_left_channel(self, stereo_wav):
        record = analyze_file(stereo_wav)
        assert record.classification.label == "male"
        assert record.classification.fundamental_frequency_hz == pytest.approx(100.0)

    def test_silent_file(self, silence_wav):
        record = analyze_file(silence_wav)
        assert record.classification.label == "unknown"
        assert record.classification.confidence == 0.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            analyze_file(tmp_path / "nope.wav")


class TestRecordSerialization:
    def _record(self) -> AnalysisRecord:
        return AnalysisRecord(
            id="123", timestamp=123, source="upload", duration=2.5,
            sample_rate=44100,
            classification=ClassificationResult("male", 0.75, 120.0),
            frequency_data=[10.0, 100.0, 55.5],
            file_name="clip.webm",
            average_volume=12.5,
        )

    def test_storage_keys(self):
        data = self._record().to_dict()
        assert data["genderDetection"] == {
            "gender": "male", "confidence": 0.75, "fundamentalFreq": 120.0,
        }
        assert data["frequencyData"] == [10.0, 100.0, 55.5]
        assert data["fileName"] == "clip.webm"
        assert data["sampleRate"] == 44100
        assert data["averageVolume"] == 12.5

    def test_file_name_omitted_when_absent(self):
        record = self._record()
        record.file_name = None
        assert "fileName" not in record.to_dict()

    def test_from_dict_restores_record(self):
        record = self._record()
        assert AnalysisRecord.from_dict(record.to_dict()) == record

    def test_analyzed_record_survives_dict_trip(self):
        record = analyze_samples(np.zeros(10), 8000, source="recording", timestamp=5)
        assert AnalysisRecord.from_dict(record.to_dict()) == record

    def test_from_dict_accepts_older_records(self):
        data = self._record().to_dict()
        del data["sampleRate"]
        del data["averageVolume"]
        restored = AnalysisRecord.from_dict(data)
        assert restored.sample_rate == 0
        assert restored.average_volume == 0.0

    def test_from_dict_rejects_unknown_label(self):
        data = self._record().to_dict()
        data["genderDetection"]["gender"] = "robot"
        with pytest.raises(ValueError, match="robot"):
            AnalysisRecord.from_dict(data)
