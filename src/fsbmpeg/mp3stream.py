from dataclasses import dataclass
from pathlib import Path
from typing import List, Iterator

import numpy as np

from .header import HEADER_SIZE, parse_header

# layer -> samples per frame; MPEG-2/2.5 Layer III carries half
SAMPLES_PER_FRAME = {1: 384, 2: 1152, 3: 1152}


@dataclass
class Frame:
    offset: int
    size: int
    layer: int
    version_index: int
    bitrate_kbps: int
    sample_rate: int
    padding: int

    @property
    def samples(self) -> int:
        if self.layer == 3 and self.version_index != 0:
            return 576
        return SAMPLES_PER_FRAME[self.layer]


class MpegStream:
    def __init__(self, data: bytes):
        self.data = data
        self.frames: List[Frame] = []
        self._scan()

    def _scan(self):
        i = 0; n = len(self.data)
        while i + HEADER_SIZE <= n:
            h = parse_header(self.data, i)
            if h is None:
                i += 1; continue
            if i + h.frame_len > n:
                break
            self.frames.append(Frame(offset=i, size=h.frame_len, layer=h.layer,
                                     version_index=h.version_index, bitrate_kbps=h.bitrate_kbps,
                                     sample_rate=h.sample_rate, padding=h.padding))
            i += h.frame_len

    def iter_padding_slots(self) -> Iterator[int]:
        """Yield absolute byte offsets for padding bytes (end of frames with padding=1)."""
        for fr in self.frames:
            if fr.padding == 1:
                yield fr.offset + fr.size - 1

    def is_contiguous(self) -> bool:
        """True if the frames tile the whole buffer with nothing in between."""
        pos = 0
        for fr in self.frames:
            if fr.offset != pos:
                return False
            pos += fr.size
        return pos == len(self.data)

    def stats(self):
        total = len(self.frames)
        padded = sum(1 for _ in self.iter_padding_slots())
        if total:
            bitrates = np.array([fr.bitrate_kbps for fr in self.frames], dtype=np.float64)
            durations = np.array([fr.samples / fr.sample_rate for fr in self.frames], dtype=np.float64)
            mean_bitrate = float(bitrates.mean())
            duration = float(durations.sum())
        else:
            mean_bitrate = 0.0
            duration = 0.0
        return {
            "total_frames": total,
            "padded_frames": padded,
            "total_bytes": int(sum(fr.size for fr in self.frames)),
            "mean_bitrate_kbps": mean_bitrate,
            "duration_sec": duration,
            "valid": total > 0,
        }


def analyze_stream_file(path: str):
    b = Path(path).read_bytes()
    return MpegStream(b).stats()
