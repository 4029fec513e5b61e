"""Bitrate / sample-rate tables and frame length arithmetic for MPEG audio.

Values are the ones used by the reference FSB5 extractor: the MPEG-2 and
MPEG-2.5 Layer II/III streams share one bitrate table, and the frame length of
every Layer II/III frame uses the 144 multiplier (MPEG-2/2.5 Layer III is not
special-cased to 72), so output stays byte-identical to that tool.
"""

ALIGNMENT = 4

# kbps, index 15 is reserved
V1_BITRATES_L1 = (0, 32, 64, 96, 128, 160, 192, 224, 256, 288, 320, 352, 384, 416, 448, -1)
V1_BITRATES_L2 = (0, 32, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320, 384, -1)
V1_BITRATES_L3 = (0, 32, 40, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320, -1)

V2_BITRATES_L1 = (0, 32, 48, 56, 64, 80, 96, 112, 128, 144, 160, 176, 192, 224, 256, -1)
V2_BITRATES_L2L3 = (0, 8, 16, 24, 32, 40, 48, 56, 64, 80, 96, 112, 128, 144, 160, -1)

SAMPLE_RATES = (
    (44100, 48000, 32000, -1),  # MPEG-1
    (22050, 24000, 16000, -1),  # MPEG-2
    (11025, 12000, 8000, -1),   # MPEG-2.5
)

# (version_index == 0, layer) -> table
_BITRATE_TABLES = {
    (True, 1): V1_BITRATES_L1,
    (True, 2): V1_BITRATES_L2,
    (True, 3): V1_BITRATES_L3,
    (False, 1): V2_BITRATES_L1,
    (False, 2): V2_BITRATES_L2L3,
}


def bitrate_kbps(version_index: int, layer: int, bitrate_index: int) -> int:
    """Bitrate in kbps, or a value <= 0 for free/reserved/unknown slots."""
    if version_index >= 1 and layer == 3:
        layer = 2
    table = _BITRATE_TABLES.get((version_index == 0, layer))
    if table is None or not 0 <= bitrate_index < len(table):
        return -1
    return table[bitrate_index]


def sample_rate_hz(version_index: int, sample_rate_index: int) -> int:
    if not 0 <= version_index < len(SAMPLE_RATES):
        return -1
    rates = SAMPLE_RATES[version_index]
    if not 0 <= sample_rate_index < len(rates):
        return -1
    return rates[sample_rate_index]


def frame_length(layer: int, bitrate: int, sample_rate: int, padding: int) -> int:
    """Frame size in bytes, header included. Truncating division on purpose."""
    if layer == 1:
        return ((12 * bitrate * 1000) // sample_rate + padding) * 4
    return (144 * bitrate * 1000) // sample_rate + padding


def next_multiple_of_4(n: int) -> int:
    rem = n % ALIGNMENT
    if rem == 0:
        return n
    return n + (ALIGNMENT - rem)
