"""Registry of kernel implementation variants and selection by CPU features.

Each variant registers an :class:`OpEntry` carrying its operations. Lookup
picks the highest-priority entry whose SIMD level the CPU supports.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from vecmath import kernels
from vecmath.cpu import Features, SIMDLevel, supports

__all__ = ["OpEntry", "OpRegistry", "GLOBAL", "register_generic"]


@dataclass
class OpEntry:
    """One implementation variant and the operations it provides.

    Operations a variant does not provide are left as ``None``.
    """

    name: str
    simd_level: SIMDLevel = SIMDLevel.NONE
    priority: int = 0

    add_block: Optional[Callable] = None
    add_block_in_place: Optional[Callable] = None
    mul_block: Optional[Callable] = None
    mul_block_in_place: Optional[Callable] = None
    scale_block: Optional[Callable] = None
    scale_block_in_place: Optional[Callable] = None

    add_mul_block: Optional[Callable] = None
    mul_add_block: Optional[Callable] = None

    max_abs: Optional[Callable] = None
    block_sum: Optional[Callable] = None
    dot_product: Optional[Callable] = None

    magnitude: Optional[Callable] = None
    power: Optional[Callable] = None

    generate_tpdf: Optional[Callable] = None
    add_dither_tpdf: Optional[Callable] = None

    rotate_decay_complex_f32: Optional[Callable] = None
    rotate_decay_accumulate_f32: Optional[Callable] = None


class OpRegistry:
    """A set of implementation variants ordered by descending priority."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: list[OpEntry] = []
        self._sorted = False

    def register(self, entry: OpEntry) -> None:
        """Add an implementation variant."""
        with self._lock:
            self._entries.append(entry)
            self._sorted = False

    def _ensure_sorted(self) -> None:
        if not self._sorted:
            # Stable: equal priorities keep registration order.
            self._entries.sort(key=lambda e: e.priority, reverse=True)
            self._sorted = True

    def lookup(self, features: Features) -> Optional[OpEntry]:
        """Return the highest-priority entry the features support, or None."""
        return self.lookup_func(features, lambda _entry: True)

    def lookup_func(
        self, features: Features, predicate: Callable[[OpEntry], bool]
    ) -> Optional[OpEntry]:
        """Return the highest-priority supported entry accepted by ``predicate``."""
        with self._lock:
            self._ensure_sorted()
            candidates = list(self._entries)
        return next(
            (e for e in candidates if supports(features, e.simd_level) and predicate(e)),
            None,
        )

    def list_entries(self) -> list[OpEntry]:
        """Return a copy of all registered entries, sorted by priority."""
        with self._lock:
            self._ensure_sorted()
            return list(self._entries)

    def reset(self) -> None:
        """Remove all registered entries."""
        with self._lock:
            self._entries = []
            self._sorted = False


def register_generic(registry: OpRegistry) -> None:
    """Register the scalar kernels as the lowest-priority fallback."""
    registry.register(
        OpEntry(
            name="generic",
            simd_level=SIMDLevel.NONE,
            priority=0,
            add_block=kernels.add_block,
            add_block_in_place=kernels.add_block_in_place,
            mul_block=kernels.mul_block,
            mul_block_in_place=kernels.mul_block_in_place,
            scale_block=kernels.scale_block,
            scale_block_in_place=kernels.scale_block_in_place,
            add_mul_block=kernels.add_mul_block,
            mul_add_block=kernels.mul_add_block,
            max_abs=kernels.max_abs,
            block_sum=kernels.block_sum,
            dot_product=kernels.dot_product,
            magnitude=kernels.magnitude,
            power=kernels.power,
            generate_tpdf=kernels.generate_tpdf,
            add_dither_tpdf=kernels.add_dither_tpdf,
            rotate_decay_complex_f32=kernels.rotate_decay_complex_f32,
            rotate_decay_accumulate_f32=kernels.rotate_decay_accumulate_f32,
        )
    )


GLOBAL = OpRegistry()
register_generic(GLOBAL)