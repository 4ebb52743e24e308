"""Installer compression settings."""

from dataclasses import dataclass
from enum import Enum

from typeguard import typechecked


class CompressionType(Enum):
    """The compressors makensis supports."""

    # DEFLATE, as used in ZIP and gzip
    ZLIB = "zlib"
    # Burrows-Wheeler based bzip2
    BZIP2 = "bzip2"
    # Lempel-Ziv-Markov chain, as used by 7-zip
    LZMA = "lzma"

    @classmethod
    def parse(cls, value: "str | CompressionType") -> "CompressionType":
        if isinstance(value, CompressionType):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(c.value for c in cls)
            raise ValueError(
                f"Invalid compression type '{value}', expected one of: {valid}"
            ) from None


DEFAULT_COMPRESSION = CompressionType.ZLIB

# In KB
DEFAULT_LZMA_DICT_SIZE = 8


@typechecked
@dataclass(frozen=True)
class CompressionSpec:
    """Compression requested for the installer."""

    algorithm: CompressionType = DEFAULT_COMPRESSION
    is_final: bool = False
    is_solid: bool = False
    dictionary_size_kb: int = DEFAULT_LZMA_DICT_SIZE

    @property
    def is_default(self) -> bool:
        """True when nothing needs to be passed to makensis.

        The dictionary size doesn't count: it's only emitted together with
        the compressor switch.
        """
        return (
            self.algorithm is DEFAULT_COMPRESSION
            and not self.is_final
            and not self.is_solid
        )

    @property
    def emits_dictionary_size(self) -> bool:
        return (
            self.algorithm is CompressionType.LZMA
            and self.dictionary_size_kb != DEFAULT_LZMA_DICT_SIZE
        )

    def set_compressor_line(self) -> str:
        """The `SetCompressor` script line for these settings."""
        parts = ["SetCompressor"]
        if self.is_final:
            parts.append("/FINAL")
        if self.is_solid:
            parts.append("/SOLID")
        parts.append(self.algorithm.name)
        return " ".join(parts)
