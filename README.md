# vecmath

Block-oriented vector math for digital signal processing, in pure Python.
The functions work on ordinary sequences of floats (such as lists) and write
their results into caller-supplied output lists in place, so the same buffers
can be reused block after block.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Operations

The public operations live in `vecmath.ops`. Each group of operations is bound,
on first use, to an implementation taken from the global registry
(`vecmath.registry.GLOBAL`) according to the detected CPU features
(`vecmath.cpu`). Operations that take several sequences require equal lengths
and raise `vecmath.kernels.LengthMismatchError` (a `ValueError`) otherwise.

Element-wise arithmetic:

- `add_block(dst, a, b)` sets `dst[i] = a[i] + b[i]`
- `add_block_in_place(dst, src)` does `dst[i] += src[i]`
- `mul_block(dst, a, b)` sets `dst[i] = a[i] * b[i]`
- `mul_block_in_place(dst, src)` does `dst[i] *= src[i]`
- `scale_block(dst, src, scalar)` sets `dst[i] = src[i] * scalar`
- `scale_block_in_place(dst, scalar)` does `dst[i] *= scalar`

Fused operations:

- `add_mul_block(dst, a, b, scalar)` sets `dst[i] = (a[i] + b[i]) * scalar`
- `mul_add_block(dst, a, b, c)` sets `dst[i] = a[i] * b[i] + c[i]`

Reductions:

- `max_abs(x)` returns the largest absolute value, or 0 for an empty input
- `block_sum(x)` returns the sum of the elements, or 0 for an empty input
- `dot_product(a, b)` returns the dot product over the shorter of the two
  inputs, or 0 when either is empty

Spectrum helpers:

- `magnitude(dst, re, im)` sets `dst[i] = sqrt(re[i]**2 + im[i]**2)`
- `power(dst, re, im)` sets `dst[i] = re[i]**2 + im[i]**2`

Modal oscillator banks, computed with single-precision rounding:

- `rotate_decay_complex_f32(re, im, cos_w, sin_w, decay)` rotates each complex
  oscillator `(re[i], im[i])` by the angle given by `cos_w[i]`, `sin_w[i]` and
  multiplies it by `decay[i]`, in place
- `rotate_decay_accumulate_f32(dst, re, im, cos_w, sin_w, decay, gain)` does
  the same and then adds `gain[i] * re[i]` (the updated real part) to `dst[i]`

```python
from vecmath import ops

dst = [0.0] * 4
ops.add_block(dst, [1.0, 2.0, 3.0, 4.0], [10.0, 20.0, 30.0, 40.0])
print(dst)                            # [11.0, 22.0, 33.0, 44.0]
print(ops.max_abs([-1.0, 2.0, -3.0]))  # 3.0
```

The same scalar kernels can also be called directly from `vecmath.kernels`,
bypassing the registry.

## TPDF dither

`vecmath.dither` generates triangular-PDF noise from a 64-word circular buffer
with additive feedback. `DitherState(seed)` seeds that buffer; the same seed
always yields the same noise sequence, and every call advances the state.

- `generate_tpdf(dst, gain, state)` fills `dst` with noise in `[-gain, +gain]`
- `add_dither_tpdf(dst, gain, state)` adds the noise to `dst` in place

A gain of 1.0 gives 2 LSB peak-to-peak dither for a full-scale signal.

```python
from vecmath.dither import DitherState, add_dither_tpdf, generate_tpdf

state = DitherState(42)
noise = [0.0] * 256
generate_tpdf(noise, 1.0, state)

signal = [0.25] * 256
add_dither_tpdf(signal, 1.0, state)
```

## CPU features and the registry

`vecmath.cpu.detect_features()` returns a `Features` record for the current
machine (read from the platform name and, on x86-64 Linux, from
`/proc/cpuinfo`) and caches it. `has_sse2()`, `has_avx2()` and `has_neon()`
query single flags, and `supports(features, level)` tells whether a
`SIMDLevel` is usable. `set_forced_features(...)` overrides detection, for
example `set_forced_features(Features(force_generic=True))`, and
`reset_detection()` clears both the override and the cache.

`vecmath.registry.OpRegistry` holds `OpEntry` records. `lookup(features)`
returns the highest-priority entry whose SIMD level the features support, and
`lookup_func(features, predicate)` additionally requires the predicate to
accept it. `register_generic(registry)` adds the scalar kernels as the
priority-0 entry named `"generic"`; the global registry is created with it.

Note that `vecmath.ops` and `vecmath.dither` bind their implementations once,
on first use; forcing other features afterwards does not rebind them.

## What the package does not do

Only the scalar `"generic"` implementation is registered. CPU features are
detected and the registry can choose between entries, but no SSE2, AVX2 or
NEON accelerated kernels are provided, so every operation runs as plain
Python. There is no command-line tool.

## Running the tests

```
pytest
```