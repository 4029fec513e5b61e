"""Strip FSB5 inter-frame padding from a raw MPEG stream.

Some FSB5 encoders pad each frame to a 4-byte boundary and insert runs of
zero bytes between frames. Decoders expecting a plain elementary stream choke
on those, so the stream is rebuilt from the valid frames only, each copied
verbatim.

The scan walks the buffer with a single cursor:

* a position that does not hold a decodable header is stepped over one byte
  at a time until sync is found again;
* a decodable frame that does not fit in the remaining bytes ends the scan,
  nothing of it is copied;
* after a frame, if the next two bytes are not a sync pattern the cursor
  jumps to the 4-byte boundary of the frame length, skips the zero run there
  and then steps back one byte, so the first non-zero byte is reread as a
  possible header start. The step back matches the reference extractor and
  is kept as-is.

Nothing here raises: garbage in gives short or empty output.
"""

from dataclasses import dataclass
from typing import Tuple

from .header import HEADER_SIZE, is_sync, parse_header
from .tables import next_multiple_of_4


@dataclass
class RepairReport:
    """Counters for one scan.

    ``padding_skipped`` counts bytes jumped over after a frame, not including
    the byte the cursor steps back onto; that byte shows up in ``resync_steps``
    or in the next copied frame.
    """
    bytes_in: int = 0
    bytes_out: int = 0
    frames_copied: int = 0
    resync_steps: int = 0
    padding_skipped: int = 0
    truncated: bool = False

    @property
    def bytes_removed(self) -> int:
        return self.bytes_in - self.bytes_out


def repair_with_report(data: bytes) -> Tuple[bytes, RepairReport]:
    """Repair ``data`` and describe what the scan did."""
    end = len(data)
    out = bytearray()
    report = RepairReport(bytes_in=end)
    pos = 0

    while pos + HEADER_SIZE <= end:
        hdr = parse_header(data, pos)
        if hdr is None:
            report.resync_steps += 1
            pos += 1
            continue

        frame_len = hdr.frame_len
        if pos + frame_len > end:
            report.truncated = True
            break

        out += data[pos:pos + frame_len]
        report.frames_copied += 1
        pos += frame_len

        if pos + 2 > end or is_sync(data, pos):
            continue

        frame_end = pos
        seek = next_multiple_of_4(frame_len) - frame_len
        pos = min(pos + seek, end)
        while pos < end and data[pos] == 0:
            pos += 1
        if pos < end:
            pos -= 1
        report.padding_skipped += max(pos - frame_end, 0)

    report.bytes_out = len(out)
    return bytes(out), report


def fix_fsb5_mpeg(data: bytes) -> bytes:
    """Return ``data`` with FSB5 padding and zero runs between frames removed."""
    fixed, _ = repair_with_report(data)
    return fixed
