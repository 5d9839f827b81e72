"""upmssfm: adaptive split-step propagation of pulses through fibers."""

from . import errors
from . import tools
from . import raman
from . import pulse
from . import fiber
from . import nlse
from .fiber import Fiber
from .nlse import NLSE, propagate
from .tools import dB
from .errors import (SSFMError, InvalidGridError, DispersionLengthMismatch,
                     DegenerateFieldError, NumericalDivergenceError)

__all__ = ['errors', 'tools', 'raman', 'pulse', 'fiber', 'nlse', 'Fiber',
           'NLSE', 'propagate', 'dB', 'SSFMError', 'InvalidGridError',
           'DispersionLengthMismatch', 'DegenerateFieldError',
           'NumericalDivergenceError']
