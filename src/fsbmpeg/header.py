from dataclasses import dataclass
from typing import Optional

from .tables import bitrate_kbps, sample_rate_hz, frame_length

SYNC_BYTE = 0xFF
SYNC_MASK = 0xF0
HEADER_SIZE = 4
MIN_FRAME_LEN = 4


@dataclass(frozen=True)
class FrameHeader:
    offset: int
    version_index: int  # 0 MPEG-1, 1 MPEG-2, 2 MPEG-2.5
    layer: int
    bitrate_index: int
    sample_rate_index: int
    padding: int
    bitrate_kbps: int
    sample_rate: int
    frame_len: int


def is_sync(data: bytes, pos: int) -> bool:
    """True if the two bytes at ``pos`` look like the start of a frame header."""
    return data[pos] == SYNC_BYTE and (data[pos + 1] & SYNC_MASK) == SYNC_MASK


def parse_header(data: bytes, pos: int) -> Optional[FrameHeader]:
    """Decode the 4-byte header at ``pos``.

    Returns None when there is no usable frame start at ``pos``: bad sync,
    invalid layer, reserved bitrate or sample rate, or a degenerate length.
    Whether the frame fits in ``data`` is left to the caller.
    """
    if pos < 0 or pos + HEADER_SIZE > len(data):
        return None
    if not is_sync(data, pos):
        return None

    b1 = data[pos + 1]
    b2 = data[pos + 2]

    version_index = 3 - ((b1 >> 3) & 0x03)
    layer = 4 - ((b1 >> 1) & 0x03)
    if layer not in (1, 2, 3):
        return None

    br_idx = (b2 >> 4) & 0x0F
    sr_idx = (b2 >> 2) & 0x03
    pad = (b2 >> 1) & 0x01

    bitrate = bitrate_kbps(version_index, layer, br_idx)
    if bitrate <= 0:
        return None
    sample_rate = sample_rate_hz(version_index, sr_idx)
    if sample_rate <= 0:
        return None

    frame_len = frame_length(layer, bitrate, sample_rate, pad)
    if frame_len < MIN_FRAME_LEN:
        return None

    return FrameHeader(
        offset=pos,
        version_index=version_index,
        layer=layer,
        bitrate_index=br_idx,
        sample_rate_index=sr_idx,
        padding=pad,
        bitrate_kbps=bitrate,
        sample_rate=sample_rate,
        frame_len=frame_len,
    )
