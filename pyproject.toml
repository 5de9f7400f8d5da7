[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dvbs2dsp"
version = "0.1.0"
description = "Signal-processing blocks for a DVB-S2 baseband chain: filters, delays, scramblers, multipliers, framing, estimation and spectrum analysis."
requires-python = ">=3.10"
keywords = ["dvb-s2", "dsp", "sdr", "filter", "scrambler", "framer", "modem"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications",
    "Topic :: Scientific/Engineering",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["dvbs2dsp"]

[tool.pytest.ini_options]
addopts = "-ra"
