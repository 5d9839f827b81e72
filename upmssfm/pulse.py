"""Initial pulse shapes and simple pulse measurements."""

import numpy as np


def sech(t, power=1, t0=1):
    """Hyperbolic secant pulse, sqrt(P0) * sech(t/T0).

    The full-width-at-half-maximum is 1.763 * T0. From
    https://www.rp-photonics.com/sech2_shaped_pulses.html
    """
    return np.sqrt(power) / np.cosh(np.asarray(t) / t0) + 0j


def gaussian(t, power=1, t0=1):
    """Gaussian pulse, sqrt(P0) * exp(-(t/T0)^2 / 2).

    The intensity full-width-at-half-maximum is 1.665 * T0.
    """
    return np.sqrt(power) * np.exp(-0.5 * (np.asarray(t) / t0)**2) + 0j


def soliton_order(power, t0, beta2, gamma):
    """Soliton order N = sqrt(gamma P0 T0^2 / |beta2|)."""
    return np.sqrt(gamma * power * t0**2 / np.abs(beta2))


def soliton_period(t0, beta2):
    """Soliton period z0 = pi/2 * T0^2 / |beta2|."""
    return 0.5 * np.pi * t0**2 / np.abs(beta2)


def calc_width(t, at, level=0.5):
    """Width of the intensity profile at a fraction of its maximum.

    Linearly interpolates between the grid points on either side of the
    outermost crossings of ``level * max(|at|^2)``.
    """
    t = np.asarray(t)
    it = np.abs(at)**2
    y = it - level * np.max(it)

    above = np.nonzero(y >= 0)[0]
    first, last = above[0], above[-1]
    if first == 0 or last == t.size - 1:
        raise ValueError('Pulse does not fall below the level inside the '
                         'time window.')

    def crossing(i, j):
        return t[i] + (t[j] - t[i]) * y[i] / (y[i] - y[j])

    return crossing(last, last + 1) - crossing(first - 1, first)
