"""
File-backed stand-in for the audio decode pipeline.

Reads WAV/FLAC files with soundfile and hands the classifier interleaved
float PCM. Streaming-segment decoding is done elsewhere; this module
exists so recorded samples can be classified from the command line.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
import soundfile as sf
import librosa

from spectral_analyzer import AudioSample

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {'.wav', '.flac'}


class AudioLoadError(RuntimeError):
    """Raised when an audio file exists but cannot be decoded."""


def list_audio_files(path: Union[str, Path]) -> List[Path]:
    """
    Resolve a file or directory argument to audio files.

    Directories are scanned (non-recursively) and sorted by name, so
    successive segments of one node are classified in order.

    Raises:
        FileNotFoundError: If the path is missing or holds no audio
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Audio path not found: {path}")
    if path.is_file():
        return [path]

    audio_files = sorted(
        p for p in path.iterdir()
        if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
    )
    if not audio_files:
        raise FileNotFoundError(
            f"No audio files found in {path}. "
            f"Supported formats: {sorted(SUPPORTED_EXTENSIONS)}"
        )
    return audio_files


def load_audio_sample(
    path: Union[str, Path],
    target_sample_rate: Optional[int] = None,
    max_seconds: Optional[float] = None,
) -> AudioSample:
    """
    Load an audio file as an interleaved AudioSample.

    Args:
        path: WAV or FLAC file
        target_sample_rate: Resample to this rate if given and different
        max_seconds: Keep only the first max_seconds of audio

    Returns:
        AudioSample with float32 interleaved samples

    Raises:
        FileNotFoundError: If the file does not exist
        AudioLoadError: If soundfile cannot decode it
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Audio file not found: {path}")

    try:
        data, sr = sf.read(path, dtype='float32', always_2d=True)
    except RuntimeError as e:
        raise AudioLoadError(f"Failed to load {path}: {e}") from e

    # data is [frames, channels]
    if max_seconds is not None and max_seconds > 0:
        data = data[:int(max_seconds * sr)]

    if target_sample_rate and sr != target_sample_rate and len(data) > 0:
        logger.info("Resampling %s from %d Hz to %d Hz", path.name, sr, target_sample_rate)
        data = librosa.resample(data.T, orig_sr=sr, target_sr=target_sample_rate).T
        sr = target_sample_rate

    channel_count = data.shape[1]
    samples = np.ascontiguousarray(data, dtype=np.float32).reshape(-1)
    logger.debug("Loaded %s: %d frame(s), %d channel(s), %d Hz",
                 path.name, data.shape[0], channel_count, sr)
    return AudioSample(samples=samples, sample_rate=int(sr), channel_count=channel_count)
