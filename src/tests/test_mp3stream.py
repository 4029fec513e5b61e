import io
import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path

# Add src directory to path for imports
BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from fsbmpeg.mp3stream import MpegStream, analyze_stream_file
from fsbmpeg.probe import probe_stream, probe_file
from fsbmpeg.repair import fix_fsb5_mpeg


def _frame(b1: int = 0xFB, b2: int = 0x90, size: int = 417) -> bytes:
    return bytes([0xFF, b1, b2, 0x00]) + b"\x55" * (size - 4)


L3 = _frame()
L3_PADDED = _frame(b2=0x92, size=418)
MPEG2_L3 = _frame(b1=0xF3, size=522)
L1 = _frame(b1=0xFF, b2=0x10, size=32)


class TestFrameInventory(unittest.TestCase):

    def test_frames_listed(self):
        st = MpegStream(L3 + L3_PADDED + L3)
        self.assertEqual([fr.offset for fr in st.frames], [0, 417, 835])
        self.assertEqual([fr.size for fr in st.frames], [417, 418, 417])
        self.assertTrue(st.is_contiguous())

    def test_padding_slots(self):
        st = MpegStream(L3 + L3_PADDED + L3_PADDED)
        self.assertEqual(list(st.iter_padding_slots()), [417 + 417, 417 + 418 + 417])

    def test_gap_is_not_contiguous(self):
        st = MpegStream(L3 + b"\x00\x00\x00" + L3)
        self.assertEqual(len(st.frames), 2)
        self.assertFalse(st.is_contiguous())

    def test_trailing_bytes_not_contiguous(self):
        self.assertFalse(MpegStream(L3 + L3[:10]).is_contiguous())

    def test_stats(self):
        stats = MpegStream(L3 * 2 + L3_PADDED).stats()
        self.assertEqual(stats["total_frames"], 3)
        self.assertEqual(stats["padded_frames"], 1)
        self.assertEqual(stats["total_bytes"], 417 * 2 + 418)
        self.assertAlmostEqual(stats["mean_bitrate_kbps"], 128.0)
        self.assertAlmostEqual(stats["duration_sec"], 3 * 1152 / 44100)
        self.assertTrue(stats["valid"])

    def test_samples_per_frame(self):
        st = MpegStream(L1 + MPEG2_L3)
        self.assertEqual([fr.samples for fr in st.frames], [384, 576])
        self.assertAlmostEqual(st.stats()["duration_sec"], 384 / 44100 + 576 / 22050)

    def test_empty_stats(self):
        stats = MpegStream(b"").stats()
        self.assertEqual(stats["total_frames"], 0)
        self.assertEqual(stats["duration_sec"], 0.0)
        self.assertFalse(stats["valid"])

    def test_analyze_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'stream.mp3')
            Path(path).write_bytes(L3 * 4)
            self.assertEqual(analyze_stream_file(path)["total_frames"], 4)


class TestProbe(unittest.TestCase):
    """Decoding needs pydub + ffmpeg; garbage must never raise."""

    def test_garbage_returns_none(self):
        self.assertIsNone(probe_stream(b"\x00" * 64))

    def test_probe_file_garbage(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'junk.mp3')
            Path(path).write_bytes(b"not audio at all")
            self.assertIsNone(probe_file(path))


def _gen_tone_mp3(seconds: float = 0.5, freq: float = 440.0) -> bytes:
    """Encode a mono sine tone to 128 kbps MP3 with pydub (needs ffmpeg)."""
    from pydub.generators import Sine
    seg = Sine(freq, sample_rate=44100).to_audio_segment(duration=int(seconds * 1000))
    buf = io.BytesIO()
    seg.export(buf, format="mp3", bitrate="128k", parameters=["-id3v2_version", "0"])
    return buf.getvalue()


def _pad_like_fsb5(mp3: bytes):
    """Return (frames joined, frames each zero-padded to a 4-byte boundary)."""
    st = MpegStream(mp3)
    clean = bytearray()
    padded = bytearray()
    for fr in st.frames:
        chunk = mp3[fr.offset:fr.offset + fr.size]
        clean += chunk
        padded += chunk + b"\x00" * (-fr.size % 4)
    return bytes(clean), bytes(padded)


@unittest.skipUnless(shutil.which("ffmpeg"), "ffmpeg not installed")
class TestDecodeRoundTrip(unittest.TestCase):
    """Round trip through a real decoder."""

    def setUp(self):
        self.mp3 = _gen_tone_mp3()

    def test_decoded_fields(self):
        info = probe_stream(self.mp3)
        self.assertIsNotNone(info)
        self.assertEqual(info["channels"], 1)
        self.assertEqual(info["frame_rate"], 44100)
        self.assertEqual(info["sample_width"], 2)
        self.assertGreater(info["duration_sec"], 0.4)
        self.assertLess(info["duration_sec"], 0.8)
        self.assertGreater(info["peak"], 1000)

    def test_repaired_padded_stream_decodes(self):
        clean, padded = _pad_like_fsb5(self.mp3)
        self.assertGreater(len(clean), 0)
        self.assertGreater(len(padded), len(clean))

        fixed = fix_fsb5_mpeg(padded)
        self.assertEqual(fixed, clean)
        self.assertTrue(MpegStream(fixed).is_contiguous())

        info = probe_stream(fixed)
        self.assertIsNotNone(info)
        self.assertEqual(info["frame_rate"], 44100)
        self.assertGreater(info["duration_sec"], 0.4)

    def test_decode_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'tone.mp3')
            Path(path).write_bytes(self.mp3)
            info = probe_file(path)
        self.assertIsNotNone(info)
        self.assertEqual(info["channels"], 1)


if __name__ == '__main__':
    unittest.main(verbosity=2)
