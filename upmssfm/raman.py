"""Raman response of the medium and its frequency-domain kernel."""

import numpy as np
from scipy.fftpack import fft

from .tools import to_native

# fraction of the nonlinearity due to the delayed Raman response in silica
RAMAN_FRACTION = 0.18


def blow_wood(t, t1=0.0122, t2=0.032):
    """Single-damped-oscillator Raman response of silica (Blow and Wood).

    ``hr(t) = (t1^2 + t2^2)/(t1 t2^2) exp(-t/t2) sin(t/t1)`` for t >= 0,
    normalized so that its integral over t is one.

    Parameters
    ----------
    t : 1D array
        The centered time grid, in ps unless t1 and t2 are rescaled.
    t1, t2 : float
        The oscillation period and damping time of the response.
    """
    t = np.asarray(t, dtype=float)
    tp = np.clip(t, 0, None)  # exp(-t/t2) overflows for large negative t
    rt = (t1**2 + t2**2) / t1 / t2**2 * np.exp(-tp/t2) * np.sin(tp/t1)
    rt[t < 0] = 0  # heaviside step function
    return rt


def raman_kernel(rt, npts=None):
    """Frequency-domain form of a time-domain Raman response.

    The response is sampled on the centered time grid; it is moved so that
    t=0 is the first sample before transforming, which makes
    ``dt * ifft(kernel * fft(x))`` the causal convolution of hr with x.

    Parameters
    ----------
    rt : 1D array
        The Raman response on the centered time grid.
    npts : int or None
        If given, the expected length of rt.

    Returns
    -------
    hrw : 1D complex array
        The kernel, in FFT order.
    """
    rt = np.asarray(rt)
    if rt.ndim != 1 or (npts is not None and rt.size != npts):
        raise ValueError('Raman response must be a 1D array of length %s, '
                         'got shape %s' % (npts, rt.shape))
    return fft(to_native(rt).astype('complex128'))
