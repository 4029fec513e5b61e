import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Tuple, TypeVar

from .repair import RepairReport, repair_with_report

logger = logging.getLogger(__name__)

W = TypeVar("W")


@dataclass(frozen=True)
class StreamInfo:
    """Per-entry stream record from the bank; only the byte length is used."""
    size: int

    def __post_init__(self):
        if self.size < 0:
            raise ValueError(f"stream size must be >= 0, got {self.size}")


class MpegErrorKind(enum.Enum):
    CREATE_HEADER = "failed to encode ID3v2 header"
    ENCODE_STREAM = "failed to encode full MPEG stream"


class MpegError(Exception):
    """I/O failure while writing an MPEG stream out of a bank.

    ``kind`` tells which step failed, ``source`` (also ``__cause__``) is the
    underlying error.
    """

    def __init__(self, kind: MpegErrorKind, source: Optional[BaseException] = None):
        super().__init__(kind.value)
        self.kind = kind
        self.source = source


def _read_stream(info: StreamInfo, source: BinaryIO) -> bytes:
    buf = bytearray()
    remaining = info.size
    try:
        while remaining > 0:
            chunk = source.read(remaining)
            if not chunk:
                break
            buf += chunk
            remaining -= len(chunk)
    except OSError as e:
        logger.error("Reading %d stream bytes failed: %s", info.size, e)
        raise MpegError(MpegErrorKind.ENCODE_STREAM, e) from e
    raw = bytes(buf)
    if len(raw) < info.size:
        logger.warning("Short stream read: declared %d bytes, got %d", info.size, len(raw))
    return raw


def _write_all(sink, data: bytes) -> None:
    # raw sinks may take only part of the buffer per call; None means the
    # sink does not report a count and took it all
    view = memoryview(data)
    while view:
        n = sink.write(view)
        if n is None:
            return
        if n == 0:
            raise OSError(f"sink accepted no bytes, {len(view)} left")
        view = view[n:]


def encode_with_report(info: StreamInfo, source: BinaryIO, sink: W) -> Tuple[W, RepairReport]:
    raw = _read_stream(info, source)
    fixed, report = repair_with_report(raw)
    try:
        _write_all(sink, fixed)
    except OSError as e:
        logger.error("Writing %d repaired bytes failed: %s", len(fixed), e)
        raise MpegError(MpegErrorKind.ENCODE_STREAM, e) from e

    logger.debug(
        "MPEG stream repaired: %d frames, %d -> %d bytes, %d resync steps, truncated=%s",
        report.frames_copied, report.bytes_in, report.bytes_out,
        report.resync_steps, report.truncated,
    )
    return sink, report


def encode(info: StreamInfo, source: BinaryIO, sink: W) -> W:
    """Copy ``info.size`` bytes of MPEG data from ``source`` into ``sink``,
    dropping FSB5 padding on the way. Returns ``sink``.

    Raises MpegError(ENCODE_STREAM) if reading or writing fails.
    """
    sink, _ = encode_with_report(info, source, sink)
    return sink


def encode_file(bank_path: str, out_path: str, offset: int, size: int) -> RepairReport:
    """Repair the stream stored at ``offset`` in a bank file and write it to ``out_path``."""
    info = StreamInfo(size=size)
    try:
        with open(bank_path, "rb") as src, open(out_path, "wb") as dst:
            src.seek(offset)
            _, report = encode_with_report(info, src, dst)
    except OSError as e:
        logger.error("Cannot repair %s at offset %d into %s: %s", bank_path, offset, out_path, e)
        raise MpegError(MpegErrorKind.ENCODE_STREAM, e) from e
    return report


def repair_file(in_path: str, out_path: str) -> RepairReport:
    """Repair an already extracted raw stream file."""
    try:
        size = Path(in_path).stat().st_size
    except OSError as e:
        logger.error("Cannot stat %s: %s", in_path, e)
        raise MpegError(MpegErrorKind.ENCODE_STREAM, e) from e
    return encode_file(in_path, out_path, 0, size)
