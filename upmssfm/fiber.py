"""Contains the fiber description and the linear (loss + dispersion) operator."""

import numpy as np
from scipy.special import factorial

from .errors import DispersionLengthMismatch
from .tools import to_native
from . import raman as raman_models


def linear_operator(alpha, dispersion, w):
    """Build the frequency-domain linear operator.

    The operator is ``-alpha/2 - 1j*beta(w)``, so that a field in the
    frequency domain evolves as ``exp(operator * z)`` without nonlinearity.

    Parameters
    ----------
    alpha : float or 1D array of length N
        The real power loss coefficient, P = P0 * exp(-alpha * z). An array
        gives one value per frequency bin in centered order (lowest frequency
        first). Complex values raise ValueError.
    dispersion : 1D array
        Either beta(w) evaluated by the caller on the N centered frequency
        points, or the Taylor coefficients ``[beta0, beta1, ..., betam]``
        of the expansion ``sum(beta_i * w**i / i!)``. An array of length N
        is always taken as a profile.
    w : 1D array of length N
        The angular frequencies in FFT order, see
        :func:`upmssfm.tools.build_grid`.

    Returns
    -------
    lin_operator : 1D complex array of length N
        The operator in FFT order.
    """
    w = np.asarray(w)
    n = w.size
    betap = np.asarray(dispersion)

    if betap.ndim != 1 or betap.size == 0 or betap.size > n:
        raise DispersionLengthMismatch(
            'dispersion must be a profile of length %i or a list of fewer '
            'Taylor coefficients, got shape %s' % (n, betap.shape))

    if np.iscomplexobj(alpha):
        raise ValueError('alpha must be real; the loss is a power coefficient.')
    alpha = np.asarray(alpha, dtype=float)
    if alpha.ndim == 0:
        loss = np.full(n, -alpha * 0.5)
    elif alpha.shape == (n,):
        loss = -to_native(alpha) * 0.5
    else:
        raise ValueError('alpha must be a scalar or an array of length %i, '
                         'got shape %s' % (n, alpha.shape))

    lin_operator = loss.astype('complex128')

    if betap.size == n:  # beta(w) specified by the user
        lin_operator = lin_operator - 1j * to_native(betap)
    else:
        with np.errstate(over='ignore', invalid='ignore'):
            for i, beta in enumerate(betap):
                lin_operator = lin_operator - 1j * beta * w**i / factorial(i)
        if not np.all(np.isfinite(lin_operator)):
            raise DispersionLengthMismatch(
                'the Taylor expansion of order %i overflows on this frequency '
                'grid; give fewer coefficients or beta(w) directly'
                % (betap.size - 1))

    return lin_operator


class Fiber:
    """A class that contains the information about a fiber."""

    def __init__(self, length=1.0, dispersion=(0,), gamma=0, alpha=0,
                 loss_dB_per_m=None, fo=None, raman=None, fr=None):
        """Generate a fiber object.

        Contains the dispersion, nonlinearity, loss and Raman data for a
        pulse to propagate through. The units can be anything, as long as
        they are self consistent. E.g., if |u|^2 is in Watts, z in meters
        and t in ps, then gamma is in 1/(W m), beta_n is in ps^n/m and fo
        is in THz.

        Parameters
        ----------
        length : float
            the length of the fiber.
        dispersion : list or array
            the beta coefficients ``[beta0, beta1, beta2, ...]`` of the
            expansion around the center frequency, or beta(w) sampled on
            the centered frequency grid (length N).
        gamma : float
            the nonlinear coefficient.
        alpha : float or array
            the power loss coefficient, P = P0 * exp(-alpha * z). Negative
            values give gain.
        loss_dB_per_m : float or None
            if given, the loss in dB per unit length. Overrides alpha.
        fo : float or None
            the center (optical) frequency, which sets the strength of the
            self-steepening term. None disables self-steepening.
        raman : None, True, 'blowwood' or array
            the Raman model. None (or False) gives an instantaneous Kerr
            response. True or 'blowwood' uses the standard silica response
            with t in ps. An array is a time-domain response sampled on the
            centered time grid of the pulse.
        fr : float or None
            the fractional Raman contribution. Defaults to 0.18 for the
            built-in model and is required for a user-supplied response. Giving
            a nonzero fr without a Raman model raises ValueError.
        """
        self.length = length
        self.gamma = gamma
        self.fo = fo

        if loss_dB_per_m is not None:
            alpha = np.log(10**(loss_dB_per_m * 0.1))
        self.alpha = alpha

        self.betas = np.copy(np.array(dispersion))
        if not np.all(np.isfinite(self.betas)):
            raise ValueError('Dispersion cannot contain NaN or inf values.')

        if raman is None or raman is False:
            if fr is not None and fr != 0:
                raise ValueError('fr needs a Raman model; set raman too.')
            self.raman = None
            self.fr = 0
        elif raman is True or isinstance(raman, str):
            if raman is not True and raman != 'blowwood':
                raise ValueError('Raman method not supported: %s' % raman)
            self.raman = 'blowwood'
            self.fr = raman_models.RAMAN_FRACTION if fr is None else fr
        else:
            if fr is None:
                raise ValueError('fr must be given with a Raman response.')
            self.raman = np.asarray(raman)
            self.fr = fr

        if not 0 <= self.fr <= 1:
            raise ValueError('fr must be between 0 and 1, got %r' % self.fr)

    def get_linear_operator(self, w):
        """The linear operator on the angular frequency grid w (FFT order)."""
        return linear_operator(self.alpha, self.betas, w)

    def get_raman_response(self, t):
        """The time-domain Raman response on the centered time grid t.

        Returns None when the fiber has no Raman contribution.
        """
        if self.raman is None:
            return None
        if isinstance(self.raman, str):
            return raman_models.blow_wood(t)
        return self.raman
