"""
Magnitude classifier: spectrum -> online status.

Microphone hum sits on integer multiples of the mains frequency (60 Hz)
and comes from electrical interference, not from the water. A stream is
only intelligible when enough energy sits outside that hum band.
"""

import logging
from typing import Optional, Union

import numpy as np

from config import ClassifierConfig, DEFAULT_CONFIG
from spectral_analyzer import Spectrum
from status import ChannelStatus

logger = logging.getLogger(__name__)


def magnitude_to_decibels(magnitude: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Convert magnitude to decibels: 20 * log10(magnitude).

    A magnitude of 0 maps to -inf.
    """
    with np.errstate(divide="ignore"):
        result = 20.0 * np.log10(np.asarray(magnitude, dtype=np.float64))
    if np.ndim(result) == 0:
        return float(result)
    return result


def is_hum_frequency(frequency: float, config: ClassifierConfig = DEFAULT_CONFIG) -> bool:
    """True if frequency is within tolerance of a multiple of the hum frequency (0 Hz excluded)."""
    return bool(hum_mask(np.asarray([frequency], dtype=np.float64), config)[0])


def hum_mask(frequencies: np.ndarray, config: ClassifierConfig = DEFAULT_CONFIG) -> np.ndarray:
    """Boolean mask of the hum entries in an array of frequencies."""
    hum = config.hum_frequency_hz
    tolerance = config.hum_tolerance_hz
    remainder = np.mod(frequencies, hum)
    near = (remainder <= tolerance) | (remainder >= hum - tolerance)
    return near & (frequencies != 0)


def hum_subset(spectrum: Spectrum, config: ClassifierConfig = DEFAULT_CONFIG) -> Spectrum:
    return spectrum.select(hum_mask(spectrum.frequencies, config))


def non_hum_subset(spectrum: Spectrum, config: ClassifierConfig = DEFAULT_CONFIG) -> Spectrum:
    return spectrum.select(~hum_mask(spectrum.frequencies, config))


def max_magnitude(spectrum: Spectrum) -> float:
    """Largest magnitude in the spectrum (0.0 when empty)."""
    if len(spectrum) == 0:
        return 0.0
    return float(np.max(spectrum.magnitudes))


def max_decibels(spectrum: Spectrum) -> float:
    return magnitude_to_decibels(max_magnitude(spectrum))


def max_non_hum_magnitude(spectrum: Spectrum, config: ClassifierConfig = DEFAULT_CONFIG) -> float:
    return max_magnitude(non_hum_subset(spectrum, config))


def total_hum_magnitude(spectrum: Spectrum, config: ClassifierConfig = DEFAULT_CONFIG) -> float:
    return float(np.sum(hum_subset(spectrum, config).magnitudes))


def total_non_hum_magnitude(spectrum: Spectrum, config: ClassifierConfig = DEFAULT_CONFIG) -> float:
    return float(np.sum(non_hum_subset(spectrum, config).magnitudes))


def signal_ratio(spectrum: Spectrum, config: ClassifierConfig = DEFAULT_CONFIG) -> float:
    """
    Ratio of total non-hum magnitude to total hum magnitude.

    The hum total is floored at 1 so a hum-free spectrum does not divide
    by zero.
    """
    hum_total = max(total_hum_magnitude(spectrum, config), 1.0)
    return total_non_hum_magnitude(spectrum, config) / hum_total


def classify_spectrum(
    spectrum: Spectrum,
    previous_status: Optional[ChannelStatus] = None,
    config: ClassifierConfig = DEFAULT_CONFIG,
) -> ChannelStatus:
    """
    Classify one spectrum.

    Steps:
    1. Max level below min-noise-decibels -> Silent.
    2. Max level inside the hysteresis band -> previous status unchanged.
    3. Nothing above the noise floor outside the hum band -> Unintelligible.
    4. Non-hum / hum energy ratio below the threshold -> Unintelligible.
    5. Otherwise Online.

    Args:
        spectrum: Channel or aggregate spectrum
        previous_status: Last aggregate status for the node (None -> Absent)
        config: Threshold snapshot

    Returns:
        ChannelStatus
    """
    if previous_status is None:
        previous_status = ChannelStatus.ABSENT

    max_db = max_decibels(spectrum)
    if max_db < config.min_noise_decibels:
        # Noise-floor silence across all frequencies
        return ChannelStatus.SILENT

    if max_db <= config.max_silence_decibels:
        return previous_status

    max_non_hum_db = magnitude_to_decibels(max_non_hum_magnitude(spectrum, config))
    if max_non_hum_db < config.min_noise_decibels:
        # Only hum above the floor
        return ChannelStatus.UNINTELLIGIBLE

    ratio = signal_ratio(spectrum, config)
    if ratio < config.min_signal_ratio:
        logger.debug("Signal ratio %.2f below %.2f", ratio, config.min_signal_ratio)
        return ChannelStatus.UNINTELLIGIBLE

    return ChannelStatus.ONLINE
