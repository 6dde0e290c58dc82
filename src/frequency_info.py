"""
Classification of one audio sample into a node status plus chart data.

classify_sample() is the entry point the monitor calls for every fresh
sample: analyze -> classify each channel and the aggregate -> reduce to
one status -> bucketize for charts. The returned ClassificationResult is
built once and never mutated; the caller keeps result.status and passes
it back as previous_status on the next call.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from config import ClassifierConfig, DEFAULT_CONFIG
from graph_bucketizer import AlignedSeries, align_series, average_decibels, bucketize
from magnitude_classifier import (
    classify_spectrum, hum_subset, max_decibels, max_magnitude,
    max_non_hum_magnitude, non_hum_subset, signal_ratio,
    total_hum_magnitude, total_non_hum_magnitude,
)
from spectral_analyzer import AudioSample, Spectrum, analyze
from status import ChannelStatus, aggregate_statuses

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationResult:
    """
    Everything derived from one PCM sample.

    Series families share one label axis (labels); a None value marks a
    gap for that series.
    """
    channel_count: int
    sample_rate: int
    channel_spectra: Tuple[Spectrum, ...]
    aggregate_spectrum: Spectrum
    channel_statuses: Tuple[ChannelStatus, ...]
    aggregate_spectrum_status: ChannelStatus
    status: ChannelStatus
    labels: Tuple[str, ...]
    summary_series: AlignedSeries
    channel_series: Tuple[AlignedSeries, ...]
    hum_channel_series: Tuple[AlignedSeries, ...]
    non_hum_channel_series: Tuple[AlignedSeries, ...]
    config: ClassifierConfig = DEFAULT_CONFIG

    def get_spectrum(self, channel: Optional[int] = None) -> Spectrum:
        """Spectrum for a channel, or the aggregate when channel is None."""
        if channel is None:
            return self.aggregate_spectrum
        return self.channel_spectra[channel]

    def get_status(self, channel: Optional[int] = None) -> ChannelStatus:
        if channel is None:
            return self.status
        return self.channel_statuses[channel]

    def max_magnitude(self, channel: Optional[int] = None) -> float:
        return max_magnitude(self.get_spectrum(channel))

    def max_decibels(self, channel: Optional[int] = None) -> float:
        return max_decibels(self.get_spectrum(channel))

    def max_non_hum_magnitude(self, channel: Optional[int] = None) -> float:
        return max_non_hum_magnitude(self.get_spectrum(channel), self.config)

    def total_hum_magnitude(self, channel: Optional[int] = None) -> float:
        return total_hum_magnitude(self.get_spectrum(channel), self.config)

    def total_non_hum_magnitude(self, channel: Optional[int] = None) -> float:
        return total_non_hum_magnitude(self.get_spectrum(channel), self.config)

    def signal_ratio(self, channel: Optional[int] = None) -> float:
        return signal_ratio(self.get_spectrum(channel), self.config)

    def signal_ratio_percent(self, channel: Optional[int] = None) -> int:
        return int(round(100 * self.signal_ratio(channel)))

    def average_hum_decibels(self, channel: Optional[int] = None) -> float:
        """Mean decibels over the hum-only chart buckets (0.0 means no data)."""
        if channel is None:
            series = self._bucketize(hum_subset(self.aggregate_spectrum, self.config))
        else:
            series = self.hum_channel_series[channel]
        return average_decibels(series)

    def average_non_hum_decibels(self, channel: Optional[int] = None) -> float:
        """Mean decibels over the non-hum chart buckets (0.0 means no data)."""
        if channel is None:
            series = self._bucketize(non_hum_subset(self.aggregate_spectrum, self.config))
        else:
            series = self.non_hum_channel_series[channel]
        return average_decibels(series)

    def _bucketize(self, spectrum: Spectrum) -> Dict[str, float]:
        return bucketize(spectrum, self.config.bucket_count, self.config.max_frequency_hz)


def classify_sample(
    samples,
    sample_rate: int,
    channel_count: int = 1,
    previous_status: Optional[ChannelStatus] = None,
    config: Optional[ClassifierConfig] = None,
) -> ClassificationResult:
    """
    Classify one PCM sample.

    Args:
        samples: Interleaved float PCM
        sample_rate: Sample rate in Hz
        channel_count: Interleaved channel count
        previous_status: Aggregate status from the previous call (None -> Absent)
        config: Threshold snapshot (defaults if None)

    Returns:
        ClassificationResult

    Raises:
        InvalidInput: If the sample fails validation
    """
    config = DEFAULT_CONFIG if config is None else config
    if previous_status is None:
        previous_status = ChannelStatus.ABSENT

    spectra = analyze(samples, sample_rate, channel_count)

    channel_statuses = tuple(
        classify_spectrum(spectrum, previous_status, config)
        for spectrum in spectra.channels
    )
    aggregate_spectrum_status = classify_spectrum(spectra.aggregate, previous_status, config)
    status = aggregate_statuses(channel_statuses + (aggregate_spectrum_status,))

    def chart(spectrum: Spectrum) -> Dict[str, float]:
        return bucketize(spectrum, config.bucket_count, config.max_frequency_hz)

    raw_series: List[Dict[str, float]] = [chart(spectra.aggregate)]
    raw_series += [chart(spectrum) for spectrum in spectra.channels]
    raw_series += [chart(hum_subset(spectrum, config)) for spectrum in spectra.channels]
    raw_series += [chart(non_hum_subset(spectrum, config)) for spectrum in spectra.channels]
    labels, aligned = align_series(raw_series)

    n = spectra.channel_count
    result = ClassificationResult(
        channel_count=n,
        sample_rate=spectra.sample_rate,
        channel_spectra=spectra.channels,
        aggregate_spectrum=spectra.aggregate,
        channel_statuses=channel_statuses,
        aggregate_spectrum_status=aggregate_spectrum_status,
        status=status,
        labels=tuple(labels),
        summary_series=aligned[0],
        channel_series=tuple(aligned[1:1 + n]),
        hum_channel_series=tuple(aligned[1 + n:1 + 2 * n]),
        non_hum_channel_series=tuple(aligned[1 + 2 * n:1 + 3 * n]),
        config=config,
    )

    logger.debug("Classified %d channel(s): %s (previous %s, channels %s)",
                 n, status, previous_status, [str(s) for s in channel_statuses])
    return result


def classify_audio_sample(
    sample: AudioSample,
    previous_status: Optional[ChannelStatus] = None,
    config: Optional[ClassifierConfig] = None,
) -> ClassificationResult:
    """classify_sample() for an AudioSample from the decode pipeline."""
    return classify_sample(sample.samples, sample.sample_rate, sample.channel_count,
                           previous_status, config)
