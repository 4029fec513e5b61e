"""Best-effort decode of a repaired stream, to check a real decoder accepts it.

pydub hands the bytes to ffmpeg; when either is missing, or the decode fails,
the probe returns None instead of raising.
"""

import io
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def probe_stream(mpeg_bytes: bytes):
    try:
        import numpy as np
        from pydub import AudioSegment
    except Exception as e:
        logger.debug("MPEG probe unavailable: %s", e)
        return None
    try:
        seg = AudioSegment.from_file(io.BytesIO(bytes(mpeg_bytes)), format="mp3")
    except Exception as e:
        logger.debug("MPEG probe decode failed: %s", e)
        return None
    samples = np.array(seg.get_array_of_samples())
    if samples.size == 0:
        logger.debug("MPEG probe decoded no audio")
        return None
    peak = int(np.abs(samples.astype(np.int64)).max())
    return {
        "channels": seg.channels,
        "frame_rate": seg.frame_rate,
        "sample_width": seg.sample_width,
        "duration_sec": float(seg.duration_seconds),
        "peak": peak,
    }


def probe_file(path: str):
    return probe_stream(Path(path).read_bytes())
