"""TPDF (triangular probability density) dither noise for audio quantisation.

Noise comes from a 64-word circular buffer with additive feedback. A
:class:`DitherState` holds that buffer and is updated by every call, so
successive calls continue the same noise sequence.
"""

from __future__ import annotations

import random
import threading
from collections.abc import Callable, MutableSequence

from vecmath import cpu
from vecmath.registry import GLOBAL

__all__ = ["TPDF_NORM", "FIELD_SIZE", "DitherState", "generate_tpdf", "add_dither_tpdf"]

# Two int32 values halved and summed span about [-2**31, 2**31]; this maps that to [-1, 1].
TPDF_NORM = 1.0 / float(1 << 31)

FIELD_SIZE = 64


class DitherState:
    """PRNG state for TPDF generation: a 64-word circular buffer and a position.

    Equal seeds give equal noise sequences.
    """

    __slots__ = ("field", "pos")

    def __init__(self, seed: int) -> None:
        rng = random.Random(seed)
        self.field: list[int] = [rng.getrandbits(32) for _ in range(FIELD_SIZE)]
        self.pos: int = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}(pos={self.pos})"


_lock = threading.Lock()
_impls: dict[str, Callable] = {}


def _impl(name: str) -> Callable:
    fn = _impls.get(name)
    if fn is not None:
        return fn
    with _lock:
        if not _impls:
            entry = GLOBAL.lookup(cpu.detect_features())
            if entry is None:
                raise RuntimeError("vecmath: no dither implementation registered")
            if entry.generate_tpdf is None or entry.add_dither_tpdf is None:
                raise RuntimeError(
                    "vecmath: selected implementation missing dither operations"
                )
            _impls["generate_tpdf"] = entry.generate_tpdf
            _impls["add_dither_tpdf"] = entry.add_dither_tpdf
        return _impls[name]


def generate_tpdf(dst: MutableSequence[float], gain: float, state: DitherState) -> None:
    """Fill ``dst`` with TPDF noise in the range [-gain, +gain].

    A gain of 1.0 gives 2 LSB peak-to-peak dither for a full-scale signal.
    """
    if not dst:
        return
    state.pos = _impl("generate_tpdf")(dst, gain * TPDF_NORM, state.field, state.pos)


def add_dither_tpdf(dst: MutableSequence[float], gain: float, state: DitherState) -> None:
    """Add TPDF noise times ``gain`` to ``dst`` in place."""
    if not dst:
        return
    state.pos = _impl("add_dither_tpdf")(dst, gain * TPDF_NORM, state.field, state.pos)