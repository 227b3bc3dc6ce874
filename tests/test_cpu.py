import pytest

from vecmath import cpu
from vecmath.cpu import Features, SIMDLevel


@pytest.fixture(autouse=True)
def _clean_detection():
    cpu.reset_detection()
    yield
    cpu.reset_detection()


@pytest.mark.parametrize(
    "level, expected",
    [
        (SIMDLevel.NONE, "None"),
        (SIMDLevel.SSE2, "SSE2"),
        (SIMDLevel.AVX, "AVX"),
        (SIMDLevel.AVX2, "AVX2"),
        (SIMDLevel.AVX512, "AVX-512"),
        (SIMDLevel.NEON, "NEON"),
        (SIMDLevel.SVE, "SVE"),
    ],
)
def test_simd_level_string(level, expected):
    assert str(level) == expected
    assert level.label == expected


@pytest.mark.parametrize(
    "features, level, expected",
    [
        (Features(), SIMDLevel.NONE, True),
        (Features(has_sse2=True), SIMDLevel.SSE2, True),
        (Features(has_sse2=False), SIMDLevel.SSE2, False),
        (Features(has_avx2=True), SIMDLevel.AVX2, True),
        (Features(has_neon=True), SIMDLevel.NEON, True),
        (Features(has_sse2=True, has_avx2=True, force_generic=True), SIMDLevel.AVX2, False),
        (Features(force_generic=True), SIMDLevel.NONE, True),
    ],
)
def test_supports(features, level, expected):
    assert cpu.supports(features, level) is expected


def test_sve_never_supported():
    everything = Features(
        has_sse2=True, has_avx=True, has_avx2=True, has_avx512=True, has_neon=True
    )
    assert cpu.supports(everything, SIMDLevel.SVE) is False


def test_avx_and_avx512_follow_flags():
    assert cpu.supports(Features(has_avx=True), SIMDLevel.AVX) is True
    assert cpu.supports(Features(), SIMDLevel.AVX) is False
    assert cpu.supports(Features(has_avx512=True), SIMDLevel.AVX512) is True
    assert cpu.supports(Features(), SIMDLevel.AVX512) is False


def test_forced_features_are_returned():
    forced = Features(has_sse2=True, has_avx2=True, architecture="amd64")
    cpu.set_forced_features(forced)
    assert cpu.detect_features() == forced
    assert cpu.has_avx2() is True
    assert cpu.has_sse2() is True
    assert cpu.has_neon() is False


def test_forced_neon():
    cpu.set_forced_features(Features(has_neon=True, architecture="arm64"))
    assert cpu.has_neon() is True
    assert cpu.has_avx2() is False


def test_reset_clears_forced_features():
    forced = Features(force_generic=True, architecture="forced-arch")
    cpu.set_forced_features(forced)
    cpu.reset_detection()
    detected = cpu.detect_features()
    assert detected.force_generic is False
    assert detected.architecture != "forced-arch"


def test_detection_is_cached_and_consistent():
    first = cpu.detect_features()
    second = cpu.detect_features()
    assert first == second
    assert isinstance(first.architecture, str) and first.architecture


def test_detected_features_match_architecture():
    detected = cpu.detect_features()
    if detected.architecture == "amd64":
        assert detected.has_sse2 is True
        assert detected.has_neon is False
    else:
        assert detected.has_sse2 is False
        assert detected.has_avx2 is False