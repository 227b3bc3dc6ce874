[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vecmath"
version = "0.1.0"
description = "Block vector math for DSP: element-wise arithmetic, reductions, spectrum helpers, TPDF dither and modal oscillator banks"
requires-python = ">=3.10"
dependencies = []
keywords = ["dsp", "audio", "vector", "dither", "tpdf", "oscillator", "spectrum"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Analysis",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vecmath"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
