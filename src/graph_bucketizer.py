"""
Log-frequency bucketing of spectra for spectral-density charts.

A spectrum with tens of thousands of bins is reduced to at most
BUCKET_COUNT points spaced logarithmically up to MAX_FREQUENCY_HZ.
Each point is labelled with the (rounded) frequency of the loudest bin
in its bucket.
"""

import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from config import BUCKET_COUNT, MAX_FREQUENCY_HZ
from magnitude_classifier import magnitude_to_decibels
from spectral_analyzer import Spectrum

# label -> decibels, in ascending frequency order
BucketSeries = Dict[str, float]
# label -> decibels, None where the series has no data for that label
AlignedSeries = Dict[str, Optional[float]]


def bucket_index(frequency: float, log_base: float, bucket_count: int) -> int:
    """Bucket for a frequency; anything below 1 Hz lands in bucket 0."""
    if frequency < 1:
        return 0
    return min(bucket_count - 1, int(math.floor(math.log(frequency) / log_base)))


def bucketize(
    spectrum: Spectrum,
    bucket_count: int = BUCKET_COUNT,
    max_frequency: float = MAX_FREQUENCY_HZ,
) -> BucketSeries:
    """
    Reduce a spectrum to log-spaced chart points.

    Args:
        spectrum: Any spectrum (aggregate, channel, or a hum/non-hum subset)
        bucket_count: Number of buckets P
        max_frequency: Frequency F_max that maps to the last bucket

    Returns:
        Ordered {label: decibels} for every non-empty bucket
    """
    # b = F_max^(1/P), so bucket i starts at b^i
    log_base = math.log(max_frequency) / bucket_count

    decibels = magnitude_to_decibels(spectrum.magnitudes)
    best_db: Dict[int, float] = {}
    best_frequency: Dict[int, float] = {}
    for frequency, db in zip(spectrum.frequencies, np.atleast_1d(decibels)):
        if not np.isfinite(db):
            # Zero magnitude carries nothing to plot
            continue
        bucket = bucket_index(float(frequency), log_base, bucket_count)
        if bucket not in best_db or db > best_db[bucket]:
            best_db[bucket] = float(db)
            best_frequency[bucket] = float(frequency)

    series: BucketSeries = {}
    for bucket in sorted(best_db):
        label = str(int(round(best_frequency[bucket])))
        # Neighbouring low-frequency buckets can round to the same label
        if label not in series or best_db[bucket] > series[label]:
            series[label] = best_db[bucket]
    return series


def sort_labels(labels) -> List[str]:
    """Sort frequency labels numerically."""
    return sorted(set(labels), key=float)


def align_series(series_list: Sequence[BucketSeries]) -> Tuple[List[str], List[AlignedSeries]]:
    """
    Put several series on one shared label axis.

    Returns:
        (labels, aligned) where labels is the numerically sorted union and
        each aligned series holds None for labels it has no data for
    """
    labels = sort_labels(label for series in series_list for label in series)
    aligned = [
        {label: series.get(label) for label in labels}
        for series in series_list
    ]
    return labels, aligned


def average_decibels(series: Dict[str, Optional[float]]) -> float:
    """
    Mean of the finite decibel values in a series.

    An empty series averages to 0.0; callers should read that as
    "no data", not as a real 0 dB level.
    """
    values = [
        value for value in series.values()
        if value is not None and math.isfinite(value)
    ]
    if not values:
        return 0.0
    return sum(values) / len(values)
