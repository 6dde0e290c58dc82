#!/usr/bin/env python3
"""
Synthetic sample generator for the stream status classifier.

Generates one WAV file per expected status:
- silent.wav: all zeros (Silent)
- hum.wav: 60 Hz mains hum with harmonics (Unintelligible)
- signal.wav: broadband noise plus tonal calls over light hum (Online)
- stereo_mixed.wav: left channel signal, right channel silent (Online)

Outputs to data/test_tones/ by default.
"""

import argparse
import sys
import numpy as np
from pathlib import Path

# Add src to path for config import
sys.path.insert(0, str(Path(__file__).parent / "src"))

from config import SAMPLE_RATE, HUM_FREQUENCY_HZ

import soundfile as sf


# --- CONFIGURATION ---
DURATION_SEC = 2.0
OUTPUT_DIR = Path("./data/test_tones")


def generate_silence(num_samples: int) -> np.ndarray:
    return np.zeros(num_samples, dtype=np.float32)


def generate_hum(num_samples: int, amplitude: float = 0.2) -> np.ndarray:
    """Mains hum: 60 Hz fundamental plus decaying odd harmonics."""
    t = np.arange(num_samples) / SAMPLE_RATE
    signal = np.zeros(num_samples)
    for harmonic in (1, 3, 5):
        signal += (1.0 / harmonic) * np.sin(2 * np.pi * HUM_FREQUENCY_HZ * harmonic * t)
    signal = signal / (np.max(np.abs(signal)) + 1e-6)
    return (amplitude * signal).astype(np.float32)


def generate_signal(num_samples: int, amplitude: float = 0.3, seed: int = 0) -> np.ndarray:
    """Broadband noise and a few whistles over light hum."""
    rng = np.random.default_rng(seed)
    t = np.arange(num_samples) / SAMPLE_RATE

    signal = rng.standard_normal(num_samples) * 0.3
    for freq in rng.uniform(1000, 8000, size=3):
        # Slow frequency sweep, like a whistle
        sweep = freq * (1 + 0.1 * np.sin(2 * np.pi * 0.5 * t))
        phase = 2 * np.pi * np.cumsum(sweep) / SAMPLE_RATE
        signal += np.sin(phase)
    signal += 0.05 * np.sin(2 * np.pi * HUM_FREQUENCY_HZ * t)

    signal = signal / (np.max(np.abs(signal)) + 1e-6)
    return (amplitude * signal).astype(np.float32)


def main() -> None:
    parser = argparse.ArgumentParser(description="Write synthetic classifier test samples.")
    parser.add_argument("--output-dir", default=str(OUTPUT_DIR))
    parser.add_argument("--duration", type=float, default=DURATION_SEC)
    args = parser.parse_args()

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    num_samples = int(SAMPLE_RATE * args.duration)

    samples = {
        "silent.wav": generate_silence(num_samples),
        "hum.wav": generate_hum(num_samples),
        "signal.wav": generate_signal(num_samples),
        "stereo_mixed.wav": np.column_stack([
            generate_signal(num_samples, seed=1),
            generate_silence(num_samples),
        ]),
    }

    for name, data in samples.items():
        path = output_dir / name
        sf.write(path, data, SAMPLE_RATE)
        print(f"Wrote {path}")


if __name__ == "__main__":
    main()
