"""CPU feature detection used to pick vector kernel implementations.

Detection runs once and is cached; tests may override it with
:func:`set_forced_features` and undo that with :func:`reset_detection`.
"""

from __future__ import annotations

import enum
import platform
import threading
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "SIMDLevel",
    "Features",
    "detect_features",
    "has_avx2",
    "has_sse2",
    "has_neon",
    "set_forced_features",
    "reset_detection",
    "supports",
]


class SIMDLevel(enum.IntEnum):
    """A SIMD instruction set extension level."""

    NONE = 0
    SSE2 = 1
    AVX = 2
    AVX2 = 3
    AVX512 = 4
    NEON = 5
    SVE = 6

    @property
    def label(self) -> str:
        """Human-readable name of the level."""
        return _LABELS.get(self, "Unknown")

    def __str__(self) -> str:
        return self.label


_LABELS = {
    SIMDLevel.NONE: "None",
    SIMDLevel.SSE2: "SSE2",
    SIMDLevel.AVX: "AVX",
    SIMDLevel.AVX2: "AVX2",
    SIMDLevel.AVX512: "AVX-512",
    SIMDLevel.NEON: "NEON",
    SIMDLevel.SVE: "SVE",
}


@dataclass(frozen=True)
class Features:
    """CPU capabilities relevant to kernel selection."""

    has_sse2: bool = False
    has_avx: bool = False
    has_avx2: bool = False
    has_avx512: bool = False
    has_neon: bool = False
    force_generic: bool = False
    architecture: str = ""


_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv8": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
}

_state_lock = threading.Lock()
_detected: Features | None = None
_forced: Features | None = None


def _architecture() -> str:
    machine = platform.machine().lower()
    return _ARCH_ALIASES.get(machine, machine)


def _cpuinfo_flags() -> set[str] | None:
    """Return the flag words from /proc/cpuinfo, or None where it is unavailable."""
    try:
        text = Path("/proc/cpuinfo").read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    flags: set[str] = set()
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if sep and key.strip().lower() in ("flags", "features"):
            flags.update(value.split())
    return flags


def _detect() -> Features:
    arch = _architecture()
    if arch == "amd64":
        flags = _cpuinfo_flags()
        if flags is None:
            # SSE2 is part of the x86-64 baseline.
            return Features(has_sse2=True, architecture=arch)
        return Features(
            has_sse2=True,
            has_avx="avx" in flags,
            has_avx2="avx2" in flags,
            has_avx512="avx512f" in flags,
            architecture=arch,
        )
    if arch == "arm64":
        # Advanced SIMD is mandatory on ARMv8.
        return Features(has_neon=True, architecture=arch)
    return Features(architecture=arch)


def detect_features() -> Features:
    """Return the features of this CPU, or the forced ones if set."""
    global _detected
    with _state_lock:
        if _forced is not None:
            return _forced
        if _detected is None:
            _detected = _detect()
        return _detected


def has_avx2() -> bool:
    """True if the CPU supports AVX2."""
    return detect_features().has_avx2


def has_sse2() -> bool:
    """True if the CPU supports SSE2."""
    return detect_features().has_sse2


def has_neon() -> bool:
    """True if the CPU supports ARM NEON."""
    return detect_features().has_neon


def set_forced_features(features: Features) -> None:
    """Override detection with the given features (intended for tests)."""
    global _forced
    with _state_lock:
        _forced = features


def reset_detection() -> None:
    """Clear forced features and the detection cache."""
    global _forced, _detected
    with _state_lock:
        _forced = None
        _detected = None


def supports(features: Features, level: SIMDLevel) -> bool:
    """Whether ``features`` allow an implementation at ``level``."""
    if features.force_generic:
        return level == SIMDLevel.NONE
    checks = {
        SIMDLevel.NONE: True,
        SIMDLevel.SSE2: features.has_sse2,
        SIMDLevel.AVX: features.has_avx,
        SIMDLevel.AVX2: features.has_avx2,
        SIMDLevel.AVX512: features.has_avx512,
        SIMDLevel.NEON: features.has_neon,
        SIMDLevel.SVE: False,
    }
    return checks.get(level, False)