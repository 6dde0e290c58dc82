"""
Spectral analysis for hydrophone audio samples.

Handles:
- Validation of interleaved PCM input
- De-interleaving into per-channel buffers
- Zero-padding to a power of two and Hann windowing
- One-sided magnitude spectra per channel plus the channel average
"""

import logging
import numbers
from dataclasses import dataclass
from typing import Dict, Iterator, Tuple

import numpy as np
import librosa

from config import SAMPLE_RATE, CHANNEL_COUNT

logger = logging.getLogger(__name__)


class InvalidInput(ValueError):
    """Raised when a PCM sample cannot be analyzed."""


@dataclass(frozen=True)
class AudioSample:
    """
    Raw PCM handed over by the decode pipeline.

    samples holds one float per (frame, channel) pair, interleaved.
    """
    samples: np.ndarray
    sample_rate: int = SAMPLE_RATE
    channel_count: int = CHANNEL_COUNT

    @property
    def frame_count(self) -> int:
        return len(self.samples) // self.channel_count

    @property
    def duration_seconds(self) -> float:
        return self.frame_count / float(self.sample_rate)


@dataclass(frozen=True)
class Spectrum:
    """
    One-sided magnitude spectrum.

    frequencies and magnitudes are parallel arrays; frequencies are
    non-negative and strictly increasing.
    """
    frequencies: np.ndarray
    magnitudes: np.ndarray

    @classmethod
    def from_mapping(cls, mapping: Dict[float, float]) -> "Spectrum":
        """Build a spectrum from a {frequency: magnitude} dict."""
        items = sorted(mapping.items())
        frequencies = np.array([f for f, _ in items], dtype=np.float64)
        magnitudes = np.array([m for _, m in items], dtype=np.float64)
        return cls(frequencies, magnitudes)

    def __len__(self) -> int:
        return len(self.frequencies)

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        return self.items()

    def items(self) -> Iterator[Tuple[float, float]]:
        """Iterate (frequency, magnitude) pairs in ascending frequency."""
        for frequency, magnitude in zip(self.frequencies, self.magnitudes):
            yield float(frequency), float(magnitude)

    def to_dict(self) -> Dict[float, float]:
        return dict(self.items())

    def select(self, mask: np.ndarray) -> "Spectrum":
        """Return the entries where mask is True."""
        mask = np.asarray(mask, dtype=bool)
        return Spectrum(self.frequencies[mask], self.magnitudes[mask])


@dataclass(frozen=True)
class SpectrumByChannel:
    """Per-channel spectra plus their bin-wise average."""
    channels: Tuple[Spectrum, ...]
    aggregate: Spectrum
    sample_rate: int
    fft_size: int

    @property
    def channel_count(self) -> int:
        return len(self.channels)

    def __getitem__(self, channel: int) -> Spectrum:
        return self.channels[channel]


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (and >= 2, so DC is always kept)."""
    size = 2
    while size < n:
        size *= 2
    return size


def validate_input(samples, sample_rate: int, channel_count: int) -> np.ndarray:
    """
    Check a PCM buffer before analysis.

    Args:
        samples: Interleaved PCM samples (any sequence or array)
        sample_rate: Sample rate in Hz
        channel_count: Number of interleaved channels

    Returns:
        The samples as a flat float64 array

    Raises:
        InvalidInput: For empty or non-numeric data, a non-positive rate, a
            non-integer channel count, or a length that does not divide
            evenly into channels
    """
    if samples is None:
        raise InvalidInput("Audio data cannot be null or empty")
    try:
        data = np.asarray(samples, dtype=np.float64).ravel()
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Audio data must be numeric: {e}") from e
    if data.size == 0:
        raise InvalidInput("Audio data cannot be null or empty")
    if (not isinstance(sample_rate, numbers.Real) or isinstance(sample_rate, bool)
            or sample_rate <= 0):
        raise InvalidInput(f"Sample rate must be positive, got {sample_rate!r}")
    if not isinstance(channel_count, numbers.Integral) or isinstance(channel_count, bool):
        raise InvalidInput(f"Channel count must be an integer, got {channel_count!r}")
    if channel_count < 1:
        raise InvalidInput(f"Channel count must be at least 1, got {channel_count}")
    if data.size % channel_count != 0:
        raise InvalidInput(
            f"Sample count {data.size} is not divisible by channel count {channel_count}"
        )
    return data


def deinterleave(data: np.ndarray, channel_count: int) -> np.ndarray:
    """Split interleaved samples into an array of shape [channels, frames]."""
    return data.reshape(-1, channel_count).T


def compute_magnitudes(frames: np.ndarray, fft_size: int) -> np.ndarray:
    """
    Pad, window and transform per-channel frames.

    Args:
        frames: Array of shape [channels, n]
        fft_size: Transform length N (power of two, >= n)

    Returns:
        Magnitudes of shape [channels, N/2]
    """
    n = frames.shape[1]
    buffer = np.zeros((frames.shape[0], fft_size), dtype=np.float64)
    buffer[:, :n] = frames
    # Periodic Hann spans the whole padded buffer
    buffer *= librosa.filters.get_window("hann", fft_size, fftbins=True)
    transform = np.fft.fft(buffer, axis=1)
    return np.abs(transform[:, :fft_size // 2])


def analyze(samples, sample_rate: int = SAMPLE_RATE,
            channel_count: int = CHANNEL_COUNT) -> SpectrumByChannel:
    """
    Compute magnitude spectra for every channel of a PCM sample.

    Bin i maps to frequency i * sample_rate / N for i < N/2, where N is
    the frame count rounded up to a power of two.

    Raises:
        InvalidInput: See validate_input
    """
    data = validate_input(samples, sample_rate, channel_count)
    frames = deinterleave(data, channel_count)
    fft_size = next_power_of_two(frames.shape[1])

    magnitudes = compute_magnitudes(frames, fft_size)
    frequencies = np.arange(fft_size // 2, dtype=np.float64) * sample_rate / fft_size

    channels = tuple(Spectrum(frequencies, magnitudes[ch]) for ch in range(channel_count))
    aggregate = Spectrum(frequencies, magnitudes.mean(axis=0))

    logger.debug("Analyzed %d frame(s) x %d channel(s) at %d Hz (N=%d)",
                 frames.shape[1], channel_count, sample_rate, fft_size)
    return SpectrumByChannel(channels, aggregate, int(sample_rate), fft_size)


def analyze_sample(sample: AudioSample) -> SpectrumByChannel:
    """Analyze an AudioSample from the decode pipeline."""
    return analyze(sample.samples, sample.sample_rate, sample.channel_count)
