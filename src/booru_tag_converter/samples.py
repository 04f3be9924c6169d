"""Built-in sample inputs, one per supported format."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Sample:
    name: str
    content: str


SAMPLES: tuple[Sample, ...] = (
    Sample(
        name="Danbooru",
        content="General\n?\n1boy 1.4M\n?\n1girl 6.1M\n?\noriginal 2.8M",
    ),
    Sample(
        name="Gelbooru",
        content=(
            "Artist? nekotokage 169Character? shirayuki tomoe 939Tag? 1girl 8032615"
            "? long hair 5441398? smile 3596391"
        ),
    ),
    Sample(
        name="Standard",
        content="masterpiece, best quality, 1girl, long hair, blue eyes, school uniform",
    ),
)


def get_sample(name: str) -> Sample:
    """Look up a sample by name (case-insensitive).

    Raises:
        KeyError: Unknown sample name
    """
    for sample in SAMPLES:
        if sample.name.lower() == name.lower():
            return sample
    raise KeyError(f"Unknown sample: {name} (available: {[s.name for s in SAMPLES]})")


class SampleCycler:
    """Return the samples in order, wrapping around, so repeated loads never repeat back to back."""

    def __init__(self, samples: tuple[Sample, ...] = SAMPLES) -> None:
        self._samples = samples
        self._index = -1

    def next(self) -> Sample:
        self._index = (self._index + 1) % len(self._samples)
        return self._samples[self._index]
