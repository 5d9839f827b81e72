"""Grid construction, frequency ordering and unit conversions."""

import numpy as np
from scipy.fftpack import fftfreq, fftshift, ifftshift

from .errors import InvalidGridError

c_mks = 299792458.0
c_nmps = c_mks * 1e9 / 1e12


def to_native(x, axes=None):
    """Reorder a centered array into FFT order (zero frequency first).

    Arrays sampled on the centered time axis, or on the centered frequency
    axis ``[-N/2, ..., N/2-1]``, are moved so that index 0 holds t=0 (or
    w=0), which is the ordering returned by ``fft``.
    """
    return ifftshift(np.asarray(x), axes=axes)


def to_centered(x, axes=None):
    """Reorder an array from FFT order into centered order.

    This is the inverse of :func:`to_native`.
    """
    return fftshift(np.asarray(x), axes=axes)


def build_grid(npts, dt):
    """Build the angular frequency and time grids.

    Parameters
    ----------
    npts : int
        The number of points. Must be even.
    dt : float
        The time step, in any unit (usually ps).

    Returns
    -------
    w : 1D array of length npts
        The angular frequencies in FFT order,
        ``2 pi [0, 1, ..., N/2-1, -N/2, ..., -1] / (N dt)``.
    t : 1D array of length npts
        The times ``[-N/2, ..., N/2-1] * dt``, centered at zero.
    """
    if isinstance(npts, bool) or not isinstance(npts, (int, np.integer)):
        raise InvalidGridError('npts must be an integer, got %r' % (npts,))
    if npts < 2 or npts % 2:
        raise InvalidGridError('npts must be even and >= 2, got %i' % npts)
    if not np.isfinite(dt) or dt <= 0:
        raise InvalidGridError('dt must be positive and finite, got %r' % dt)

    w = 2 * np.pi * fftfreq(npts, dt)
    t = (np.arange(npts) - npts // 2) * dt
    return w, t


def energy(at, dt=1):
    """Energy of a field, sum(|at|^2) * dt."""
    return np.sum(np.abs(at)**2) * dt


def dB(num):
    with np.errstate(divide='ignore'):
        return 10 * np.log10(np.abs(num)**2)


def D2_to_beta2(wavelength_nm, D2):
    """Convert dispersion parameter D [ps/nm/km] to GVD beta2 [ps^2/km]."""
    return -(wavelength_nm**2) / (2.0 * np.pi * c_nmps) * D2


def beta2_to_D2(wavelength_nm, beta2):
    """Convert GVD beta2 [ps^2/km] to dispersion parameter D [ps/nm/km]."""
    return -(2.0 * np.pi * c_nmps) / (wavelength_nm**2) * beta2


def wavelength_to_frequency(wavelength_nm):
    """Optical frequency in THz for a wavelength in nm."""
    return c_nmps / wavelength_nm
