"""Element-wise block operations and reductions for DSP work.

Multiplication:
  mul_block: dst[i] = a[i] * b[i]; mul_block_in_place: dst[i] *= src[i]
  scale_block: dst[i] = src[i] * scalar; scale_block_in_place: dst[i] *= scalar
Addition:
  add_block: dst[i] = a[i] + b[i]; add_block_in_place: dst[i] += src[i]
Fused:
  add_mul_block: dst[i] = (a[i] + b[i]) * scalar
  mul_add_block: dst[i] = a[i] * b[i] + c[i]
Reductions: max_abs, block_sum, dot_product.
Spectrum: magnitude, power. Modal oscillators: the rotate_decay functions.

The implementation of each group is chosen from the global registry on first
use, according to the detected CPU features, and reused afterwards.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, MutableSequence, Sequence

from vecmath import cpu
from vecmath.registry import GLOBAL

__all__ = [
    "add_block",
    "add_block_in_place",
    "mul_block",
    "mul_block_in_place",
    "scale_block",
    "scale_block_in_place",
    "add_mul_block",
    "mul_add_block",
    "max_abs",
    "block_sum",
    "dot_product",
    "magnitude",
    "power",
    "rotate_decay_complex_f32",
    "rotate_decay_accumulate_f32",
]

_GROUPS: dict[str, tuple[str, ...]] = {
    "add": ("add_block", "add_block_in_place"),
    "mul": ("mul_block", "mul_block_in_place"),
    "scale": ("scale_block", "scale_block_in_place"),
    "fused": ("add_mul_block", "mul_add_block"),
    "maxabs": ("max_abs",),
    "sum": ("block_sum",),
    "dotproduct": ("dot_product",),
    "magnitude": ("magnitude",),
    "power": ("power",),
}
_OP_GROUP = {op: group for group, ops in _GROUPS.items() for op in ops}
# Operations looked up individually, since not every variant provides them.
_PER_OP = ("rotate_decay_complex_f32", "rotate_decay_accumulate_f32")

_lock = threading.Lock()
_bound: dict[str, Callable] = {}


def _bind_group(group: str) -> None:
    entry = GLOBAL.lookup(cpu.detect_features())
    if entry is None:
        raise RuntimeError(f"vecmath: no {group} implementation registered")
    impls = {op: getattr(entry, op) for op in _GROUPS[group]}
    if any(fn is None for fn in impls.values()):
        raise RuntimeError(f"vecmath: selected implementation missing {group} operations")
    _bound.update(impls)


def _bind_per_op() -> None:
    features = cpu.detect_features()
    impls = {}
    for op in _PER_OP:
        entry = GLOBAL.lookup_func(features, lambda e, op=op: getattr(e, op) is not None)
        if entry is None:
            raise RuntimeError(f"vecmath: no {op} implementation registered")
        impls[op] = getattr(entry, op)
    _bound.update(impls)


def _impl(op: str) -> Callable:
    fn = _bound.get(op)
    if fn is not None:
        return fn
    with _lock:
        if op not in _bound:
            if op in _OP_GROUP:
                _bind_group(_OP_GROUP[op])
            else:
                _bind_per_op()
        return _bound[op]


def add_block(dst: MutableSequence[float], a: Sequence[float], b: Sequence[float]) -> None:
    """dst[i] = a[i] + b[i]; all lengths must match."""
    _impl("add_block")(dst, a, b)


def add_block_in_place(dst: MutableSequence[float], src: Sequence[float]) -> None:
    """dst[i] += src[i]; lengths must match."""
    _impl("add_block_in_place")(dst, src)


def mul_block(dst: MutableSequence[float], a: Sequence[float], b: Sequence[float]) -> None:
    """dst[i] = a[i] * b[i]; all lengths must match."""
    _impl("mul_block")(dst, a, b)


def mul_block_in_place(dst: MutableSequence[float], src: Sequence[float]) -> None:
    """dst[i] *= src[i]; lengths must match."""
    _impl("mul_block_in_place")(dst, src)


def scale_block(dst: MutableSequence[float], src: Sequence[float], scalar: float) -> None:
    """dst[i] = src[i] * scalar; lengths must match."""
    _impl("scale_block")(dst, src, scalar)


def scale_block_in_place(dst: MutableSequence[float], scalar: float) -> None:
    """dst[i] *= scalar."""
    _impl("scale_block_in_place")(dst, scalar)


def add_mul_block(
    dst: MutableSequence[float], a: Sequence[float], b: Sequence[float], scalar: float
) -> None:
    """dst[i] = (a[i] + b[i]) * scalar; all lengths must match."""
    _impl("add_mul_block")(dst, a, b, scalar)


def mul_add_block(
    dst: MutableSequence[float],
    a: Sequence[float],
    b: Sequence[float],
    c: Sequence[float],
) -> None:
    """dst[i] = a[i] * b[i] + c[i]; all lengths must match."""
    _impl("mul_add_block")(dst, a, b, c)


def max_abs(x: Sequence[float]) -> float:
    """Largest absolute value in ``x``; 0 when empty."""
    return _impl("max_abs")(x)


def block_sum(x: Sequence[float]) -> float:
    """Sum of the elements of ``x``; 0 when empty."""
    return _impl("block_sum")(x)


def dot_product(a: Sequence[float], b: Sequence[float]) -> float:
    """Sum of a[i] * b[i] over the shorter sequence; 0 when either is empty."""
    return _impl("dot_product")(a, b)


def magnitude(dst: MutableSequence[float], re: Sequence[float], im: Sequence[float]) -> None:
    """dst[i] = sqrt(re[i]**2 + im[i]**2); all lengths must match."""
    _impl("magnitude")(dst, re, im)


def power(dst: MutableSequence[float], re: Sequence[float], im: Sequence[float]) -> None:
    """dst[i] = re[i]**2 + im[i]**2; all lengths must match."""
    _impl("power")(dst, re, im)


def rotate_decay_complex_f32(
    re: MutableSequence[float],
    im: MutableSequence[float],
    cos_w: Sequence[float],
    sin_w: Sequence[float],
    decay: Sequence[float],
) -> None:
    """Rotate and damp a bank of complex oscillators in place (single precision)."""
    _impl("rotate_decay_complex_f32")(re, im, cos_w, sin_w, decay)


def rotate_decay_accumulate_f32(
    dst: MutableSequence[float],
    re: MutableSequence[float],
    im: MutableSequence[float],
    cos_w: Sequence[float],
    sin_w: Sequence[float],
    decay: Sequence[float],
    gain: Sequence[float],
) -> None:
    """Rotate and damp the oscillators, then dst[i] += gain[i] * re[i]."""
    _impl("rotate_decay_accumulate_f32")(dst, re, im, cos_w, sin_w, decay, gain)