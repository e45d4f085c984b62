"""Loading of PCM WAV audio into a format description and sample bytes."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Union

WAVE_FORMAT_PCM = 1
_WAVEFORMATEX_SIZE = 18

_RIFF = struct.Struct("<4sI4s")
_CHUNK = struct.Struct("<4sI")
_FMT = struct.Struct("<HHIIHH")
_EXT = struct.Struct("<H")

_UNSIGNED_TO_SIGNED_8 = bytes((value - 128) & 0xFF for value in range(256))


class WavFormatError(ValueError):
    """Raised when data is not a readable WAV file."""


@dataclass(frozen=True)
class WaveFormat:
    """Playback format of a PCM stream."""

    channels: int
    samples_per_sec: int
    bits_per_sample: int
    format_tag: int = WAVE_FORMAT_PCM
    cb_size: int = _WAVEFORMATEX_SIZE

    @property
    def block_align(self) -> int:
        return (self.bits_per_sample >> 3) * self.channels

    @property
    def avg_bytes_per_sec(self) -> int:
        return self.block_align * self.samples_per_sec


@dataclass(frozen=True)
class AudioResource:
    """Decoded WAV audio: its format and raw sample data."""

    wave_format: WaveFormat
    data: bytes

    @property
    def audio_bytes(self) -> int:
        return len(self.data)

    @classmethod
    def parse(cls, data: bytes) -> AudioResource:
        """Parse the bytes of a RIFF/WAVE file."""
        size = len(data)
        pos = 0

        def read(layout: struct.Struct) -> tuple:
            nonlocal pos
            if pos + layout.size > size:
                raise WavFormatError(f"truncated WAV data at offset {pos}")
            values = layout.unpack_from(data, pos)
            pos += layout.size
            return values

        def take(count: int) -> bytes:
            nonlocal pos
            if pos + count > size:
                raise WavFormatError(f"truncated WAV data at offset {pos}")
            chunk = bytes(data[pos:pos + count])
            pos += count
            return chunk

        tag, _riff_size, kind = read(_RIFF)
        if tag != b"RIFF":
            raise WavFormatError("not in RIFF format")
        if kind != b"WAVE":
            raise WavFormatError("not in WAVE format")

        fmt = None
        samples = b""
        while size > pos:
            chunk_tag, chunk_size = read(_CHUNK)
            if chunk_tag == b"fmt ":
                fmt = read(_FMT)
                if chunk_size > _FMT.size:
                    (ext_size,) = read(_EXT)
                    if pos + chunk_size == size:
                        break
                    pos += ext_size
            elif chunk_tag == b"data":
                samples = take(chunk_size)
            else:
                if pos + chunk_size == size:
                    break
                pos += chunk_size

        if fmt is None:
            raise WavFormatError("missing fmt chunk")
        _fmt_id, channels, sample_rate, _trans_rate, _block_size, bits = fmt
        if bits == 8:
            samples = samples.translate(_UNSIGNED_TO_SIGNED_8)
        return cls(WaveFormat(channels, sample_rate, bits), samples)

    @classmethod
    def load(cls, path: Union[str, PathLike]) -> AudioResource:
        """Read and parse a WAV file."""
        return cls.parse(Path(path).read_bytes())