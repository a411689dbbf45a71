"""
Deterministic hashing of integer lattice coordinates.

Scatter-point jitter must depend only on the world seed and the lattice cell,
never on call order, so that neighbouring chunks compute identical points
without sharing state. Python integers are masked to 64 bits to keep results
identical on every platform.
"""

from typing import Tuple

_MASK64 = 0xFFFFFFFFFFFFFFFF

PRIME_X = 0x5205402B9270C86F
PRIME_Z = 0x598CD327003817B5

_INV_2_32 = 2.3283064365386963e-10  # 2^-32


def _uint64(n: int) -> int:
    """Convert to unsigned 64-bit integer."""
    return n & _MASK64


def _avalanche(h: int) -> int:
    """Finalizer of MurmurHash3 (fmix64): every input bit affects every output bit."""
    h ^= h >> 33
    h = _uint64(h * 0xFF51AFD7ED558CCD)
    h ^= h >> 33
    h = _uint64(h * 0xC4CEB9FE1A85EC53)
    h ^= h >> 33
    return h


def hash_coordinates(seed: int, cell_x: int, cell_z: int) -> int:
    """Hash a world seed and a lattice cell into an unsigned 64-bit integer."""
    h = _uint64(seed) ^ _uint64(cell_x * PRIME_X) ^ _uint64(cell_z * PRIME_Z)
    return _avalanche(h)


def unit_offsets(seed: int, cell_x: int, cell_z: int) -> Tuple[float, float]:
    """
    Two independent values in [-1, 1) for a lattice cell.

    The high and low 32 bits of the cell hash are used for x and z.
    """
    h = hash_coordinates(seed, cell_x, cell_z)
    ox = (h >> 32) * _INV_2_32 * 2.0 - 1.0
    oz = (h & 0xFFFFFFFF) * _INV_2_32 * 2.0 - 1.0
    return ox, oz
