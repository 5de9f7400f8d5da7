# dvbs2dsp

Building blocks for a DVB-S2 baseband transmitter and receiver, written with
numpy. Complex samples are passed as interleaved float arrays
`[re0, im0, re1, im1, ...]`.

Most blocks work on `n_frames` frames at once. Pass `frame_id=-1` to process
every frame. Pass a frame index to process only frame `frame_id % n_frames`.
In that case the other output frames are zero. Filters, delays and the
multipliers that carry state keep that state from one call to the next, so a
run of frames is treated as one continuous stream. Sizes that do not match
raise `ValueError`.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `dvbs2dsp.filters`
  - `Filter`: the abstract base class, with `filter(x, frame_id)` and `reset()`.
  - `FIRFilter`: real taps applied to complex samples, with `step(x)` for
    single samples.
  - `FarrowFilter`: a four-tap fractional-delay interpolator, with
    `set_mu(mu)`, `step(x)` and `redo_step(mu)`.
  - `RootRaisedCosineFilter`, and `synthesize_rrc(rolloff, samples_per_symbol,
    delay_in_symbol)`, which builds a unit-energy root-raised-cosine
    response.
  - `UpsamplingFIRFilter`: a polyphase interpolator. It raises the sample
    rate by `factor`.
- `dvbs2dsp.delays`
  - `UnitDelay`: delays by one frame.
  - `BufferedDelay`: delays by `delay` frames, up to `max_delay`. Its
    `buffer_lines()` method describes the stored frames.
  - `VariableDelay`: delays by a number of complex samples. `set_delay(delay)`
    saturates the value to `max_delay`.
- `dvbs2dsp.scramblers`
  - `Scrambler`: the base class, with `scramble(x, frame_id)` and
    `descramble(y, frame_id)`.
  - `BBScrambler`: the baseband scrambler. It XORs bits with the
    1 + x^14 + x^15 LFSR sequence, which restarts on every frame.
- `dvbs2dsp.multipliers`
  - `Multiplier`: the base class. `imultiply(x, frame_id)` multiplies by the
    block's own signal. `multiply(x, y, frame_id)` multiplies two signals
    sample by sample.
  - `AGCMultiplier`: scales each frame to `output_energy`.
  - `FadingMultiplier`: reads `esn0 frame_count` pairs from a text file and
    applies the gain sequence they describe, looping. If the file cannot be
    opened, the gain is 1.
  - `SequenceMultiplier`: multiplies by a fixed complex sequence.
  - `SineMultiplier`: shifts the signal in frequency. The normalised
    frequency is truncated to six decimals.
- `dvbs2dsp.framer`
  - `generate_plh(modcod)`: builds the π/2-BPSK PL header, 180 reals. The
    known MODCOD names are `QPSK-S_8/9`, `QPSK-S_3/5`, `8PSK-S_3/5`,
    `8PSK-S_8/9` and `16APSK-S_8/9`.
  - `Framer`: `generate` prepends the header and inserts 36 pilot symbols
    after every 16 slots. `remove_plh` strips both again.
- `dvbs2dsp.feedbacker`
  - `Feedbacker`: a per-frame memory, with `memorize(x, frame_id)`,
    `produce(frame_id)` and `set_n_frames(n_frames)`.
- `dvbs2dsp.estimator`
  - `Estimator`: the base class. `estimate(x, frame_id)` returns an
    `Estimate` holding `sigma`, `ebn0` and `esn0` arrays.
  - `DVBS2Estimator`: the M2M4 moments estimator. Es/N0 saturates at 100 dB.
  - `esn0_to_sigma(esn0)` and `esn0_to_ebn0(esn0, code_rate, bps)`.
- `dvbs2dsp.spectrum`
  - `Spectrum`: an exponentially averaged power spectrum with a
    Blackman-Harris window. `analyze(x)` returns `(freq, spectrum)`, with the
    frequencies ordered from `-fs/2` upward.
- `dvbs2dsp.conductor`
  - `arange(start, stop, step)`.
  - `Conductor`: steps through a grid of `(delta_x, delta_y)` perturbations.
    Each `generate()` call returns a `ConductorOutput`.
  - `AddImpulses`: `add(ix_x, ix_y, delta_x, delta_y, r_in)` returns `r_in`
    with the two positions overwritten.

## Example

```python
import numpy as np
from dvbs2dsp.filters import RootRaisedCosineFilter
from dvbs2dsp.scramblers import BBScrambler

rrc = RootRaisedCosineFilter(2 * 1024, rolloff=0.2, samples_per_symbol=4, delay_in_symbol=10)
samples = np.random.default_rng(0).standard_normal(2 * 1024)
shaped = rrc.filter(samples, -1)

scrambler = BBScrambler(16)
bits = np.array([1, 0] * 8)
assert np.array_equal(scrambler.descramble(scrambler.scramble(bits, -1), -1), bits)
```

## What it does not do

This is a library of processing blocks only. It has no command-line program.
It does not talk to radio hardware, so it cannot send or receive samples. It
has no BCH or LDPC encoders or decoders, no PL scrambler, and no task or
pipeline scheduler to connect the blocks. The blocks are plain objects that
you call from your own code.