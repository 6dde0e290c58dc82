# config.py
"""
Configuration for the audio-stream status classifier.

Module-level constants hold the defaults. Callers build one immutable
ClassifierConfig at startup (or per test) and pass it into every
classification call; nothing in the algorithm reads the environment.
"""

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

# --- AUDIO PIPELINE ---
SAMPLE_RATE = 44100        # Decode pipeline default (Hz)
CHANNEL_COUNT = 1          # Decode pipeline default

# --- CLASSIFIER THRESHOLDS ---
MIN_NOISE_DECIBELS = -95.0       # Below this the spectrum is silence
MAX_SILENCE_DECIBELS = -80.0     # Top of the hysteresis band
# Known-bad samples measure <= ~13x, known-good >= ~17x.
MIN_SIGNAL_RATIO_PERCENT = 1400.0

# --- HUM BAND ---
HUM_FREQUENCY_HZ = 60.0
HUM_TOLERANCE_HZ = 1.05

# --- GRAPH BUCKETING ---
MAX_FREQUENCY_HZ = 24000.0   # Above human hearing, inside orca call range
BUCKET_COUNT = 1000

# --- PATHS ---
STATUS_LOG_FILE = "./logs/status_log.jsonl"

# --- ENVIRONMENT ---
ENV_VARIABLES = {
    "min-noise-decibels": "ORCASOUND_MIN_NOISE_DECIBELS",
    "max-silence-decibels": "ORCASOUND_MAX_SILENCE_DECIBELS",
    "min-signal-ratio-percent": "ORCASOUND_MIN_INTELLIGIBLE_SIGNAL_PERCENT",
    "max-frequency-hz": "ORCASOUND_MAX_FREQUENCY_HZ",
    "bucket-count": "ORCASOUND_BUCKET_COUNT",
}


class ConfigError(ValueError):
    """Raised when classifier thresholds are inconsistent."""


@dataclass(frozen=True)
class ClassifierConfig:
    """Immutable snapshot of every tunable the classifier reads."""

    min_noise_decibels: float = MIN_NOISE_DECIBELS
    max_silence_decibels: float = MAX_SILENCE_DECIBELS
    min_signal_ratio_percent: float = MIN_SIGNAL_RATIO_PERCENT
    max_frequency_hz: float = MAX_FREQUENCY_HZ
    bucket_count: int = BUCKET_COUNT
    hum_frequency_hz: float = HUM_FREQUENCY_HZ
    hum_tolerance_hz: float = HUM_TOLERANCE_HZ

    @property
    def min_signal_ratio(self) -> float:
        """Signal ratio threshold as a plain ratio (1400% -> 14.0)."""
        return self.min_signal_ratio_percent / 100.0

    def validate(self) -> "ClassifierConfig":
        """
        Check the thresholds for consistency.

        Returns:
            self, so construction and validation can be chained

        Raises:
            ConfigError: If any value is out of range
        """
        if self.min_noise_decibels > self.max_silence_decibels:
            raise ConfigError(
                f"min-noise-decibels ({self.min_noise_decibels}) must not exceed "
                f"max-silence-decibels ({self.max_silence_decibels})"
            )
        if self.min_signal_ratio_percent < 0:
            raise ConfigError("min-signal-ratio-percent must be non-negative")
        if self.bucket_count < 1:
            raise ConfigError("bucket-count must be at least 1")
        if self.max_frequency_hz <= 1:
            raise ConfigError("max-frequency-hz must be greater than 1")
        if self.hum_frequency_hz <= 0:
            raise ConfigError("hum frequency must be positive")
        if not 0 <= self.hum_tolerance_hz <= self.hum_frequency_hz / 2:
            raise ConfigError("hum tolerance must be within [0, hum frequency / 2]")
        return self

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ClassifierConfig":
        """
        Build a config from kebab-case keys (e.g. "min-noise-decibels").

        Missing keys keep their defaults. A value that does not parse falls
        back to the default with a warning, the same way a malformed
        environment variable is ignored.
        """
        kwargs: Dict[str, Any] = {}
        for field in fields(cls):
            key = field.name.replace("_", "-")
            raw = values.get(key)
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                continue
            cast = int if field.type in (int, "int") else float
            try:
                kwargs[field.name] = cast(raw)
            except (TypeError, ValueError):
                logger.warning("Ignoring unparseable %s=%r, using default %s",
                               key, raw, field.default)
        return cls(**kwargs).validate()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClassifierConfig":
        """Build a config from ORCASOUND_* environment variables."""
        environ = os.environ if environ is None else environ
        values = {
            key: environ[name]
            for key, name in ENV_VARIABLES.items()
            if name in environ
        }
        return cls.from_mapping(values)


DEFAULT_CONFIG = ClassifierConfig()
