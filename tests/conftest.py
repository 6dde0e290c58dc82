"""
Pytest fixtures for the stream status classifier test suite.

Provides:
- Temporary directories for audio/logs
- Deterministic tone generators whose frequencies land exactly on FFT bins
- WAV file factory
- Spectrum builders for classifier-level tests
"""

import sys
import pytest
import numpy as np
import soundfile as sf
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from config import ClassifierConfig


# =============================================================================
# Bin-aligned test signals
# =============================================================================
#
# With N = 1024 frames:
#   8192 Hz sample rate -> 8 Hz bins, 1000 Hz is bin 125, no hum bins near it
#   7680 Hz sample rate -> 7.5 Hz bins, 60 Hz is bin 8, 120 Hz is bin 16
#
# A bin-aligned tone of amplitude A under a periodic Hann window gives
# magnitude A*N/4 at its bin and A*N/8 at the two neighbours, nothing else.

FRAMES = 1024
SIGNAL_RATE = 8192
HUM_RATE = 7680


def make_tone(frequency, sample_rate, num_frames=FRAMES, amplitude=0.5):
    """Sine tone as float64 (one channel)."""
    i = np.arange(num_frames)
    return amplitude * np.sin(2 * np.pi * frequency * i / sample_rate)


def interleave(*channels):
    """Interleave equal-length channel arrays into one PCM buffer."""
    return np.column_stack(channels).reshape(-1)


@pytest.fixture
def tone():
    return make_tone


@pytest.fixture
def interleaved():
    return interleave


@pytest.fixture
def signal_tone():
    """1000 Hz bin-aligned tone at SIGNAL_RATE."""
    return make_tone(1000, SIGNAL_RATE)


@pytest.fixture
def hum_tone():
    """60 Hz bin-aligned tone at HUM_RATE."""
    return make_tone(60, HUM_RATE)


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_audio_dir(tmp_path):
    """Create a temporary directory for audio files."""
    audio_dir = tmp_path / "samples"
    audio_dir.mkdir()
    return audio_dir


@pytest.fixture
def temp_log_dir(tmp_path):
    """Create a temporary directory for log files."""
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    return log_dir


# =============================================================================
# Audio File Fixtures
# =============================================================================

@pytest.fixture
def make_wav_file():
    """Factory fixture to create WAV files from channel arrays."""
    def _make_wav(path, *channels, sample_rate=SIGNAL_RATE, subtype='FLOAT'):
        """
        Create a WAV file.

        Args:
            path: Output file path
            channels: One array per channel (equal lengths)
            sample_rate: Sample rate in Hz
            subtype: soundfile subtype (FLOAT avoids quantization noise)
        """
        if len(channels) == 1:
            data = np.asarray(channels[0], dtype=np.float32)
        else:
            data = np.column_stack(channels).astype(np.float32)
        sf.write(path, data, sample_rate, subtype=subtype)
        return path

    return _make_wav


# =============================================================================
# Config / Spectrum Fixtures
# =============================================================================

@pytest.fixture
def default_config():
    return ClassifierConfig()


@pytest.fixture
def make_spectrum():
    """Build a Spectrum from a {frequency: magnitude} dict."""
    from spectral_analyzer import Spectrum

    def _make(mapping):
        return Spectrum.from_mapping(mapping)

    return _make
