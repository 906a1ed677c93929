"""
Pydantic models for analyzer settings and the published feature snapshot.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

MIN_FFT_SIZE = 2


class AnalyzerSettings(BaseModel):
    """Parameters of the feature pipeline. Invalid values raise ValidationError."""
    model_config = ConfigDict(frozen=True)

    sample_rate: int = Field(default=44100, gt=0, description="Capture sample rate in Hz")
    fft_size_hint: int = Field(
        default=256, gt=0,
        description="Requested FFT size, rounded up to a power of two"
    )
    rms_window_seconds: float = Field(
        default=0.1, gt=0,
        description="Length of the loudness window in seconds (smaller reacts faster)"
    )
    silence_threshold: float = Field(
        default=0.001, ge=0,
        description="Total spectrum energy below which the input counts as silent"
    )
    smoothing_coefficient: float = Field(
        default=0.3, gt=0, lt=1,
        description="Exponential smoothing factor, smaller is smoother and slower"
    )

    @model_validator(mode="after")
    def _check_rms_window(self) -> "AnalyzerSettings":
        if self.rms_window_length < 1:
            raise ValueError(
                f"rms_window_seconds={self.rms_window_seconds} holds no samples "
                f"at {self.sample_rate} Hz"
            )
        return self

    @property
    def fft_size(self) -> int:
        # Imported here: the analysis package imports this module
        from ..analysis.fft import next_power_of_two
        return max(MIN_FFT_SIZE, next_power_of_two(self.fft_size_hint))

    @property
    def rms_window_length(self) -> int:
        return round(self.rms_window_seconds * self.sample_rate)

    @property
    def spectrum_length(self) -> int:
        return self.fft_size // 2

    @property
    def freq_per_bin(self) -> float:
        return self.sample_rate / self.fft_size


class FeatureSnapshot(BaseModel):
    """Smoothed audio features of the latest tick, all in 0..1."""
    model_config = ConfigDict(frozen=True)

    normalized_rms: float = Field(default=0.0, ge=0, le=1, description="Average loudness, 0=silent")
    normalized_peak: float = Field(default=0.0, ge=0, le=1, description="Peak loudness")
    low_band_energy: float = Field(default=0.0, ge=0, le=1, description="Energy share 0-300 Hz")
    mid_band_energy: float = Field(default=0.0, ge=0, le=1, description="Energy share 300 Hz-4 kHz")
    high_band_energy: float = Field(default=0.0, ge=0, le=1, description="Energy share above 4 kHz")
