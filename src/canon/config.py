"""Run configuration, loadable from YAML."""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from canon.oracle import DEFAULT_CACHE_MAX_WIDTH, MAX_CACHE_WIDTH
from canon.space import SUPPORTED_WIDTHS, ByteOrder, VectorSpace
from canon.stream import StreamProcessor

DEFAULT_CONFIG_NAME = ".canon.yml"


@dataclass
class CanonConfig:
    """Settings for a basis extraction run.

    Attributes:
        width: Bits per value; the input is read in blocks of `width // 8` bytes.
        byteorder: Byte order of multi-byte values.
        capacity: Optional rank cap below `width`. An independent value arriving
            once the cap is reached aborts the pass.
        cache_max_width: Widest space for which the membership cache is kept.
        shard_size: If set, the input is split into shards of this many values
            whose local bases are merged.
        max_workers: Number of processes used for shards.
    """

    width: int = 8
    byteorder: ByteOrder = "little"
    capacity: int | None = None
    cache_max_width: int = DEFAULT_CACHE_MAX_WIDTH
    shard_size: int | None = None
    max_workers: int | None = None

    def __post_init__(self):
        if self.width not in SUPPORTED_WIDTHS:
            raise ValueError(
                f"width must be one of {SUPPORTED_WIDTHS}, got {self.width}"
            )
        if self.byteorder not in ("little", "big"):
            raise ValueError(
                f"byteorder must be 'little' or 'big', got {self.byteorder!r}"
            )
        if self.capacity is not None and not 1 <= self.capacity <= self.width:
            raise ValueError(
                f"capacity must be between 1 and {self.width}, got {self.capacity}"
            )
        if not 0 <= self.cache_max_width <= MAX_CACHE_WIDTH:
            raise ValueError(
                f"cache_max_width must be between 0 and {MAX_CACHE_WIDTH}, "
                f"got {self.cache_max_width}"
            )
        if self.shard_size is not None and self.shard_size <= 0:
            raise ValueError(f"shard_size must be positive, got {self.shard_size}")
        if self.max_workers is not None and self.max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")

    @property
    def space(self) -> VectorSpace:
        return VectorSpace(self.width, self.byteorder)

    def processor(self, **kwargs) -> StreamProcessor:
        """Create a `StreamProcessor` with these settings."""
        return StreamProcessor(
            self.space,
            capacity=self.capacity,
            cache_max_width=self.cache_max_width,
            **kwargs,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CanonConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    def save_to_file(self, file_path: str | Path) -> None:
        """Save configuration to a YAML file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    @classmethod
    def load_from_file(cls, file_path: str | Path) -> "CanonConfig":
        """Load configuration from a YAML file."""
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Expected a mapping in {file_path}")
        return cls.from_dict(data)

    @classmethod
    def load_or_default(cls, config_path: str | Path | None = None) -> "CanonConfig":
        """Load `config_path`, else `./.canon.yml` if present, else the defaults."""
        if config_path is not None:
            return cls.load_from_file(config_path)
        default_path = Path(DEFAULT_CONFIG_NAME)
        if default_path.exists():
            return cls.load_from_file(default_path)
        return cls()
