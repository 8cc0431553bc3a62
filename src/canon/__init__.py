"""
canon extracts the GF(2) basis spanned by the values of a byte stream.

Each W-bit value of the stream is a vector over the two-element field, with XOR as
vector addition. A single forward pass keeps every value that is linearly
independent of those kept before it, together with the stream position where it
was found.

The repo is organized as follows:

1. `space.py` provides the vector space primitives (`add`, `leading_bit`) and
   splits raw bytes into W-bit values.
2. `oracle.py` decides span membership against a basis in reduced row-echelon form
   and keeps a value-indexed reachability cache.
3. `basis.py` holds the growing basis, in discovery order, and owns the rank and its
   capacity bound.
4. `stream.py` drives the pass, optionally over shards whose local bases are merged.
5. `archive.py`, `report.py`, `config.py` and `cli.py` persist, report and configure
   runs.
"""

__version__ = "0.1.0"

from canon.basis import BasisStore as BasisStore
from canon.errors import (
    ArchiveError as ArchiveError,
    CanonError as CanonError,
    CapacityExceededError as CapacityExceededError,
    InvalidInputError as InvalidInputError,
    PassCancelledError as PassCancelledError,
)
from canon.oracle import SpanOracle as SpanOracle
from canon.space import VectorSpace as VectorSpace, add as add, leading_bit as leading_bit
from canon.stream import StreamProcessor as StreamProcessor, extract_basis as extract_basis
