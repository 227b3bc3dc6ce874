"""Scalar reference kernels for the vector operations.

Block operations write into ``dst`` in place and raise
:class:`LengthMismatchError` when slice lengths differ.
"""

from __future__ import annotations

import math
import struct
from collections.abc import MutableSequence, Sequence

__all__ = [
    "LengthMismatchError",
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
    "generate_tpdf",
    "add_dither_tpdf",
    "rotate_decay_complex_f32",
    "rotate_decay_accumulate_f32",
]

_UINT32_MASK = 0xFFFFFFFF
_FIELD_MASK = 63
_F32 = struct.Struct("<f")


class LengthMismatchError(ValueError):
    """Raised when the sequences given to a block operation differ in length."""

    def __init__(self, message: str = "vecmath: slice length mismatch") -> None:
        super().__init__(message)


def _check_lengths(*seqs: Sequence) -> int:
    n = len(seqs[0])
    if any(len(s) != n for s in seqs[1:]):
        raise LengthMismatchError()
    return n


def _f32(x: float) -> float:
    """Round a float to single precision."""
    try:
        return _F32.unpack(_F32.pack(x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


def _int32(value: int) -> int:
    value &= _UINT32_MASK
    return value - (1 << 32) if value & 0x80000000 else value


def add_block(dst: MutableSequence[float], a: Sequence[float], b: Sequence[float]) -> None:
    """dst[i] = a[i] + b[i]."""
    _check_lengths(dst, a, b)
    for i, (x, y) in enumerate(zip(a, b)):
        dst[i] = x + y


def add_block_in_place(dst: MutableSequence[float], src: Sequence[float]) -> None:
    """dst[i] += src[i]."""
    _check_lengths(dst, src)
    for i, y in enumerate(src):
        dst[i] += y


def mul_block(dst: MutableSequence[float], a: Sequence[float], b: Sequence[float]) -> None:
    """dst[i] = a[i] * b[i]."""
    _check_lengths(dst, a, b)
    for i, (x, y) in enumerate(zip(a, b)):
        dst[i] = x * y


def mul_block_in_place(dst: MutableSequence[float], src: Sequence[float]) -> None:
    """dst[i] *= src[i]."""
    _check_lengths(dst, src)
    for i, y in enumerate(src):
        dst[i] *= y


def scale_block(dst: MutableSequence[float], src: Sequence[float], scale: float) -> None:
    """dst[i] = src[i] * scale."""
    _check_lengths(dst, src)
    for i, x in enumerate(src):
        dst[i] = x * scale


def scale_block_in_place(dst: MutableSequence[float], scale: float) -> None:
    """dst[i] *= scale."""
    for i, x in enumerate(dst):
        dst[i] = x * scale


def add_mul_block(
    dst: MutableSequence[float], a: Sequence[float], b: Sequence[float], scale: float
) -> None:
    """dst[i] = (a[i] + b[i]) * scale."""
    _check_lengths(dst, a, b)
    for i, (x, y) in enumerate(zip(a, b)):
        dst[i] = (x + y) * scale


def mul_add_block(
    dst: MutableSequence[float],
    a: Sequence[float],
    b: Sequence[float],
    c: Sequence[float],
) -> None:
    """dst[i] = a[i] * b[i] + c[i]."""
    _check_lengths(dst, a, b, c)
    for i, (x, y, z) in enumerate(zip(a, b, c)):
        dst[i] = x * y + z


def max_abs(x: Sequence[float]) -> float:
    """Largest absolute value in ``x``; 0 for an empty sequence."""
    if not x:
        return 0.0
    it = iter(x)
    best = abs(next(it))
    for value in it:
        v = abs(value)
        if v > best:
            best = v
    return best


def block_sum(x: Sequence[float]) -> float:
    """Sum of the elements, accumulated left to right; 0 for an empty sequence."""
    total = 0.0
    for value in x:
        total += value
    return total


def dot_product(a: Sequence[float], b: Sequence[float]) -> float:
    """Sum of a[i] * b[i] over the shorter of the two sequences."""
    total = 0.0
    for x, y in zip(a, b):
        total += x * y
    return total


def magnitude(dst: MutableSequence[float], re: Sequence[float], im: Sequence[float]) -> None:
    """dst[i] = sqrt(re[i]**2 + im[i]**2)."""
    _check_lengths(dst, re, im)
    for i, (r, m) in enumerate(zip(re, im)):
        dst[i] = math.sqrt(r * r + m * m)


def power(dst: MutableSequence[float], re: Sequence[float], im: Sequence[float]) -> None:
    """dst[i] = re[i]**2 + im[i]**2."""
    _check_lengths(dst, re, im)
    for i, (r, m) in enumerate(zip(re, im)):
        dst[i] = r * r + m * m


def _tpdf_samples(count: int, field: MutableSequence[int], pos: int):
    """Yield ``count`` raw TPDF integers, updating ``field``; the final position is
    returned as the generator's value."""
    for _ in range(count):
        total = 0
        for _half in range(2):
            val = field[pos]
            total += _int32(val) >> 1
            prev = (pos - 1) & _FIELD_MASK
            field[prev] = (field[prev] + val) & _UINT32_MASK
            pos = (pos + 2) & _FIELD_MASK
        yield total
    return pos


def _run_tpdf(dst: MutableSequence[float], scale: float, field, pos: int, accumulate: bool) -> int:
    samples = _tpdf_samples(len(dst), field, pos)
    i = 0
    while True:
        try:
            raw = next(samples)
        except StopIteration as stop:
            return stop.value
        noise = float(raw) * scale
        if accumulate:
            dst[i] += noise
        else:
            dst[i] = noise
        i += 1


def generate_tpdf(
    dst: MutableSequence[float], scale: float, field: MutableSequence[int], pos: int
) -> int:
    """Fill ``dst`` with TPDF noise times ``scale``; return the new field position.

    ``field`` holds 64 unsigned 32-bit values and is updated in place.
    """
    return _run_tpdf(dst, scale, field, pos, accumulate=False)


def add_dither_tpdf(
    dst: MutableSequence[float], scale: float, field: MutableSequence[int], pos: int
) -> int:
    """Add TPDF noise times ``scale`` to ``dst``; return the new field position."""
    return _run_tpdf(dst, scale, field, pos, accumulate=True)


def _rotate(r: float, m: float, c: float, s: float, d: float) -> tuple[float, float]:
    r, m, c, s, d = _f32(r), _f32(m), _f32(c), _f32(s), _f32(d)
    new_re = _f32(d * _f32(_f32(r * c) - _f32(m * s)))
    new_im = _f32(d * _f32(_f32(r * s) + _f32(m * c)))
    return new_re, new_im


def rotate_decay_complex_f32(
    re: MutableSequence[float],
    im: MutableSequence[float],
    cos_w: Sequence[float],
    sin_w: Sequence[float],
    decay: Sequence[float],
) -> None:
    """Rotate and damp a bank of complex oscillators in place, in single precision."""
    _check_lengths(re, im, cos_w, sin_w, decay)
    for i, (c, s, d) in enumerate(zip(cos_w, sin_w, decay)):
        re[i], im[i] = _rotate(re[i], im[i], c, s, d)


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
    _check_lengths(re, im, cos_w, sin_w, decay, gain, dst)
    for i, (c, s, d, g) in enumerate(zip(cos_w, sin_w, decay, gain)):
        new_re, new_im = _rotate(re[i], im[i], c, s, d)
        re[i] = new_re
        im[i] = new_im
        dst[i] = _f32(_f32(dst[i]) + _f32(_f32(g) * new_re))