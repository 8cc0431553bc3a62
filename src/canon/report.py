"""Human readable statistics for a finished pass."""

from dataclasses import asdict, dataclass
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from canon.basis import BasisStore

# Bytes per stored derivation position.
POSITION_BYTES = 4

MB = 1024 * 1024


@dataclass(frozen=True)
class CompressionStats:
    """Size and timing figures for one pass.

    Attributes:
        input_size: Size of the input in bytes.
        basis_size: Bytes needed to store the basis elements.
        derivation_size: Bytes needed to store the derivation positions.
        rank: Final rank.
        width: Bits per value.
        time_seconds: Wall-clock duration of the pass.
    """

    input_size: int
    basis_size: int
    derivation_size: int
    rank: int
    width: int
    time_seconds: float

    @property
    def compressed_size(self) -> int:
        return self.basis_size + self.derivation_size

    @property
    def compression_ratio(self) -> float:
        """Size saving in percent. Negative when the archive outgrows the input."""
        if self.input_size == 0:
            return 0.0
        return (1.0 - self.compressed_size / self.input_size) * 100.0

    @property
    def throughput_mb_s(self) -> float:
        if self.time_seconds <= 0:
            return 0.0
        return self.input_size / MB / self.time_seconds

    @property
    def work(self) -> int:
        """The n * r bound on the number of row operations of the pass."""
        num_values = -(-self.input_size * 8 // self.width)
        return num_values * self.rank

    @property
    def effective_complexity(self) -> str:
        """Classify the pass by how the rank compares with the input size."""
        if self.rank < 1000:
            return "~Θ(n), nearly linear"
        if self.rank < self.input_size / 100:
            return "~Θ(n), linear with small constant"
        if self.rank < self.input_size / 10:
            return "Θ(n·r), sub-quadratic"
        return "Θ(n²), incompressible"


def compute_stats(
    input_size: int, store: BasisStore, time_seconds: float
) -> CompressionStats:
    return CompressionStats(
        input_size=input_size,
        basis_size=store.rank * store.space.value_bytes,
        derivation_size=store.rank * POSITION_BYTES,
        rank=store.rank,
        width=store.space.width,
        time_seconds=time_seconds,
    )


def stats_to_dict(stats: CompressionStats) -> dict[str, Any]:
    """Flatten stats, including derived figures, for JSON output."""
    data = asdict(stats)
    data.update(
        compressed_size=stats.compressed_size,
        compression_ratio=stats.compression_ratio,
        throughput_mb_s=stats.throughput_mb_s,
        work=stats.work,
        effective_complexity=stats.effective_complexity,
    )
    return data


def stats_table(stats: CompressionStats) -> Table:
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row(
        "Input size", f"{stats.input_size} bytes ({stats.input_size / MB:.2f} MB)"
    )
    table.add_row(
        "Basis size", f"{stats.basis_size} bytes ({stats.basis_size / 1024:.2f} KB)"
    )
    table.add_row("Derivation size", f"{stats.derivation_size} bytes")
    table.add_row(f"Rank (GF(2)^{stats.width})", str(stats.rank))
    table.add_row("Compression ratio", f"{stats.compression_ratio:.2f}%")
    table.add_row("Time taken", f"{stats.time_seconds:.3f} seconds")
    table.add_row("Throughput", f"{stats.throughput_mb_s:.2f} MB/s")
    table.add_row("Work (n·r)", str(stats.work))
    table.add_row("Effective", stats.effective_complexity)
    return table


def render_stats(stats: CompressionStats, console: Console | None = None) -> None:
    """Print stats as a boxed table."""
    console = console or Console()
    console.print(
        Panel(stats_table(stats), title="CANON statistics", expand=False)
    )


def basis_table(store: BasisStore) -> Table:
    """Tabulate the basis elements with their derivation positions."""
    digits = store.space.width // 4
    table = Table(title=f"Basis (rank {store.rank})")
    table.add_column("#", justify="right")
    table.add_column("Element", justify="right")
    table.add_column("Binary")
    table.add_column("Position", justify="right")
    for i, (value, position) in enumerate(store):
        table.add_row(
            str(i),
            f"0x{value:0{digits}x}",
            f"{value:0{store.space.width}b}",
            str(position),
        )
    return table
