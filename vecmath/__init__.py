"""Block vector math for DSP: arithmetic, reductions, spectrum helpers, TPDF dither and
modal oscillators, with implementations chosen from a registry by CPU features."""

__version__ = "0.1.0"

__all__ = ["cpu", "kernels", "registry", "ops", "dither"]