import pytest

from vecmath import kernels
from vecmath.cpu import Features, SIMDLevel
from vecmath.registry import GLOBAL, OpEntry, OpRegistry, register_generic


def _x86_registry():
    reg = OpRegistry()
    reg.register(OpEntry(name="generic", simd_level=SIMDLevel.NONE, priority=0))
    reg.register(OpEntry(name="avx2", simd_level=SIMDLevel.AVX2, priority=20))
    reg.register(OpEntry(name="sse2", simd_level=SIMDLevel.SSE2, priority=10))
    return reg


def test_register_two_entries():
    reg = OpRegistry()
    reg.register(
        OpEntry(name="generic", simd_level=SIMDLevel.NONE, priority=0,
                add_block=lambda dst, a, b: None)
    )
    reg.register(
        OpEntry(name="avx2", simd_level=SIMDLevel.AVX2, priority=20,
                add_block=lambda dst, a, b: None)
    )
    assert len(reg.list_entries()) == 2


@pytest.mark.parametrize(
    "features, want",
    [
        (Features(has_sse2=True, has_avx2=True), "avx2"),
        (Features(has_sse2=True, has_avx2=False), "sse2"),
        (Features(has_sse2=False, has_avx2=False), "generic"),
        (Features(has_sse2=True, has_avx2=True, force_generic=True), "generic"),
    ],
)
def test_lookup_priority(features, want):
    entry = _x86_registry().lookup(features)
    assert entry is not None
    assert entry.name == want


@pytest.mark.parametrize(
    "features, want",
    [(Features(has_neon=True), "neon"), (Features(has_neon=False), "generic")],
)
def test_lookup_arm(features, want):
    reg = OpRegistry()
    reg.register(OpEntry(name="generic", simd_level=SIMDLevel.NONE, priority=0))
    reg.register(OpEntry(name="neon", simd_level=SIMDLevel.NEON, priority=15))
    entry = reg.lookup(features)
    assert entry is not None
    assert entry.name == want


def test_list_entries_sorted_by_priority():
    names = [e.name for e in _x86_registry().list_entries()]
    assert names == ["avx2", "sse2", "generic"]


def test_list_entries_returns_copy():
    reg = _x86_registry()
    entries = reg.list_entries()
    entries.clear()
    assert len(reg.list_entries()) == 3


def test_lookup_empty_registry_returns_none():
    assert OpRegistry().lookup(Features()) is None


def test_reset_clears_entries():
    reg = _x86_registry()
    reg.reset()
    assert reg.list_entries() == []
    assert reg.lookup(Features(has_sse2=True)) is None


def test_lookup_func_skips_entries_failing_predicate():
    reg = OpRegistry()
    reg.register(OpEntry(name="generic", priority=0, max_abs=kernels.max_abs))
    reg.register(OpEntry(name="sse2", simd_level=SIMDLevel.SSE2, priority=10))
    features = Features(has_sse2=True)
    assert reg.lookup(features).name == "sse2"
    entry = reg.lookup_func(features, lambda e: e.max_abs is not None)
    assert entry.name == "generic"


def test_lookup_func_none_when_no_match():
    reg = _x86_registry()
    assert reg.lookup_func(Features(has_avx2=True), lambda e: False) is None


def test_register_generic_provides_all_operations():
    reg = OpRegistry()
    register_generic(reg)
    entry = reg.lookup(Features())
    assert entry.name == "generic"
    assert entry.priority == 0
    assert entry.simd_level == SIMDLevel.NONE
    assert entry.add_block is kernels.add_block
    assert entry.mul_block is kernels.mul_block
    assert entry.max_abs is kernels.max_abs
    assert entry.rotate_decay_accumulate_f32 is kernels.rotate_decay_accumulate_f32
    dst = [0.0, 0.0]
    entry.add_block(dst, [1.0, 2.0], [3.0, 4.0])
    assert dst == [4.0, 6.0]


def test_global_registry_has_generic():
    names = {e.name for e in GLOBAL.list_entries()}
    assert "generic" in names
    assert GLOBAL.lookup(Features(force_generic=True)).name == "generic"