"""MPEG audio frame headers: validation, decoding and stream scanning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Optional

MP3_FRAME_SYNC = 0xFFE00000

SHIFT_VERSION = 19
SHIFT_LAYER = 17
SHIFT_BITRATE = 12
SHIFT_SAMPLERATE = 10

MASK_VERSION = 0x00180000
MASK_BITRATE = 0x0000F000
MASK_SAMPLERATE = 0x00000C00
MASK_PADDING = 0x00000200
MASK_CHANNEL = 0x000000C0
PROTECTION_BIT = 0x00010000

MPEG_1 = 3
MPEG_2 = 2
MPEG_25 = 0

LAYER_3 = 1
LAYER_2 = 2
LAYER_1 = 3

CHANNEL_STEREO = 0x00
CHANNEL_JOINT = 0x01
CHANNEL_DUAL = 0x02
CHANNEL_MONO = 0x03

# kbit/s per bitrate index: (MPEG-1, MPEG-2/2.5)
_BITRATES = (
    (-1, -1),
    (32, 8),
    (40, 16),
    (48, 24),
    (56, 32),
    (64, 40),
    (80, 48),
    (96, 56),
    (112, 64),
    (128, 80),
    (160, 96),
    (192, 112),
    (224, 128),
    (256, 144),
    (320, 160),
    (-1, -1),
)

# Hz per sample-rate index: (MPEG-1, MPEG-2, MPEG-2.5)
_SAMPLING_RATES = (
    (44100, 22050, 11025),
    (48000, 24000, 12000),
    (32000, 16000, 8000),
)


@dataclass(frozen=True)
class Mp3Frame:
    """Fields decoded from one 32-bit frame header."""

    version: int
    channel: int
    bitrate: int
    sampling_rate: int
    samples: int
    size: int


@dataclass(frozen=True)
class Mp3Info:
    """Summary of a stream: sample rate, channel count and bitrate in bit/s.

    ``sampling_rate`` is not filled in by the header readers; ``rate`` is.
    """

    rate: int = 0
    channel: int = 0
    sampling_rate: int = 0
    bitrate: int = 0


def check_header(header: int) -> bool:
    """Return True when ``header`` looks like a valid frame header."""
    header &= 0xFFFFFFFF
    return not (
        (header & MP3_FRAME_SYNC) != MP3_FRAME_SYNC
        or ((header >> SHIFT_VERSION) & 0x3) == 1
        or ((header >> SHIFT_LAYER) & 0x3) == 0
        or ((header >> SHIFT_BITRATE) & 0xF) == 0xF
        or ((header >> SHIFT_BITRATE) & 0xF) == 0
        or ((header >> SHIFT_SAMPLERATE) & 0x3) == 0x3
        or (header & 0xFFFF0000) == 0xFFFE0000
    )


def parse_frame_header(header: int) -> Mp3Frame:
    """Decode a frame header; raise ValueError if it cannot describe a frame."""
    header &= 0xFFFFFFFF
    version = (header >> SHIFT_VERSION) & 0x3
    bitrate_index = (header >> SHIFT_BITRATE) & 0xF
    rate_index = (header >> SHIFT_SAMPLERATE) & 0x3
    if rate_index == 0x3:
        raise ValueError(f"invalid header {header:x}")

    if version == MPEG_25:
        bitrate = _BITRATES[bitrate_index][1]
        sampling_rate = _SAMPLING_RATES[rate_index][2]
        factor = 72
    elif version == MPEG_2:
        bitrate = _BITRATES[bitrate_index][1]
        sampling_rate = _SAMPLING_RATES[rate_index][1]
        factor = 72
    elif version == MPEG_1:
        bitrate = _BITRATES[bitrate_index][0]
        sampling_rate = _SAMPLING_RATES[rate_index][0]
        factor = 144
    else:
        raise ValueError(f"invalid header {header:x}")

    product = factor * bitrate * 1000
    size = abs(product) // sampling_rate
    if product < 0:
        size = -size
    if size == 0:
        raise ValueError("frame size is zero")
    if header & MASK_PADDING:
        size += 1

    return Mp3Frame(
        version=version,
        channel=(header & MASK_CHANNEL) >> 6,
        bitrate=bitrate,
        sampling_rate=sampling_rate,
        samples=1152 if sampling_rate > 32000 else 576,
        size=size,
    )


def find_next_frame(stream: BinaryIO) -> Mp3Frame:
    """Scan ``stream`` byte by byte for a valid header and decode it.

    The stream is rewound to its start afterwards. Raises ValueError when no
    valid header is found.
    """
    try:
        while True:
            chunk = stream.read(4)
            if len(chunk) < 4:
                raise ValueError("no valid frame header found")
            header = int.from_bytes(chunk, "big")
            if check_header(header):
                return parse_frame_header(header)
            stream.seek(-3, 1)
    finally:
        stream.seek(0)


def _info_from(frame: Mp3Frame) -> Mp3Info:
    return Mp3Info(
        rate=frame.sampling_rate & 0xFFFF,
        channel=1 if frame.channel == CHANNEL_MONO else 2,
        bitrate=frame.bitrate * 1000,
    )


def read_mp3_header(stream: Optional[BinaryIO]) -> Mp3Info:
    """Read the first frame header of a file; all zeros if there is none."""
    if stream is None:
        return Mp3Info()
    try:
        return _info_from(find_next_frame(stream))
    except ValueError:
        return Mp3Info()


def parse_mp3_stream(data: bytes) -> Mp3Info:
    """Find the first frame header in a buffer; all zeros if there is none."""
    data = bytes(data)
    for pos in range(len(data) - 3):
        header = int.from_bytes(data[pos : pos + 4], "big")
        if check_header(header):
            try:
                return _info_from(parse_frame_header(header))
            except ValueError:
                return Mp3Info()
    return Mp3Info()


def total_time(bitrate: int, file_length: int) -> int:
    """Play time in seconds: the length divided by the bitrate, times eight."""
    quotient = abs(file_length) // abs(bitrate)
    if (file_length < 0) != (bitrate < 0):
        quotient = -quotient
    return quotient * 8