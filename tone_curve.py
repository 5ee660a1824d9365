from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from meta_data import U16_SCALE


def _frozen(values):
    arr = np.array(values, dtype=np.float64).ravel()
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class ToneCurve:
    """
    Per-channel transfer curve, one of:
      'gamma'   -> y = x ** gamma
      'curve'   -> uniformly spaced integer table, y = interp(table) / scale
      'sampled' -> uniformly spaced float table over [0, 1]
    sample() clamps its input to [0, 1].
    """
    type: str
    gamma: Optional[float] = None
    values: Optional[np.ndarray] = field(default=None, repr=False)
    scale: float = 1.0

    @classmethod
    def from_gamma(cls, gamma):
        return cls('gamma', gamma=float(gamma))

    @classmethod
    def from_lut(cls, table, scale=U16_SCALE):
        # an empty table is the identity, same as an empty curveType
        if len(table) == 0:
            return cls.from_gamma(1.0)
        return cls('curve', values=_frozen(table), scale=float(scale))

    @classmethod
    def from_samples(cls, samples):
        if len(samples) == 0:
            return cls.from_gamma(1.0)
        return cls('sampled', values=_frozen(samples))

    def __len__(self):
        return 0 if self.values is None else self.values.size

    def sample(self, x):
        x = np.clip(np.asarray(x, dtype=np.float64), 0.0, 1.0)
        if self.type == 'gamma':
            y = np.power(x, self.gamma)
        elif self.type in ('curve', 'sampled'):
            n = self.values.size
            y = np.interp(x * (n - 1), np.arange(n), self.values) / self.scale
        else:
            raise ValueError(f"unknown tone curve type {self.type!r}")
        if y.ndim == 0:
            return float(y)
        return y

    def table(self, n=256):
        return self.sample(np.linspace(0.0, 1.0, n))

    def to_dict(self):
        if self.type == 'gamma':
            return {'type': 'gamma', 'gamma': self.gamma}
        return {'type': self.type, 'values': (self.values / self.scale).tolist()}
