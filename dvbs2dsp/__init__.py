"""Signal-processing blocks for a DVB-S2 baseband chain: filters, delays, scramblers, multipliers, framing, feedback memory, noise estimation, spectrum analysis and perturbation sweeps."""

__version__ = "0.1.0"