"""Propagation of pulses according to the generalized NLSE.

The equation is solved with the symmetric split-step Fourier method. The
nonlinear part of every step is integrated with a fourth-order Runge-Kutta
scheme in the interaction picture, and the step size is chosen from the
uncertainty-principle (UPM) criterion of

    A. A. Rieznik, T. Tolisano, F. A. Callegari, D. F. Grosz, and
    H. L. Fragnito, "Uncertainty relation for the optimization of
    optical-fiber transmission systems simulations," Opt. Express 13,
    3822-3834 (2005).

so that the dispersive and nonlinear contributions to the local error stay
balanced.
"""

import time

import numpy as np
import matplotlib.pyplot as plt
from scipy.fftpack import fft, ifft

from .errors import (DegenerateFieldError, InvalidGridError,
                     NumericalDivergenceError)
from .fiber import linear_operator
from .raman import raman_kernel
from .tools import build_grid, dB, to_centered


def _check_finite(x, stage, z):
    if not np.all(np.isfinite(x)):
        raise NumericalDivergenceError(
            'Non-finite values in %s at z = %.6e. Try a smaller tolerance.'
            % (stage, z))


def estimate_step(at, aw, gamma, lin_operator, tol, remaining=np.inf):
    """Estimate the next step size from the UPM criterion.

    The nonlinear bandwidth deltaN is the energy-weighted spread of the
    nonlinear phase rate gamma*|u|^2 in the time domain. The dispersive
    bandwidth deltaD is the spread of 1j*lin_operator weighted by the
    spectral energy. The step is ``tol**(1/3) / sqrt(deltaD * deltaN)``.

    Parameters
    ----------
    at : 1D complex array
        The field in the time domain.
    aw : 1D complex array
        fft(at).
    gamma : float
        The nonlinear coefficient.
    lin_operator : 1D complex array
        The linear operator, see :func:`upmssfm.fiber.linear_operator`.
    tol : float
        The convergence tolerance.
    remaining : float
        The fiber length left to propagate. The step never exceeds it.

    Returns
    -------
    dz : float
        The step size. When one of the two spreads is zero, the step is
        unbounded and the remaining length is returned.
        A spread that is not finite raises NumericalDivergenceError.
    """
    it = np.abs(at)**2
    iw = np.abs(aw)**2
    et = np.sum(it)
    ew = np.sum(iw)

    if not (np.isfinite(et) and np.isfinite(ew)):
        raise NumericalDivergenceError('Field energy is not finite.')
    if et == 0 or ew == 0:
        raise DegenerateFieldError(
            'The field has zero energy; the step size is undefined.')

    phase_rate = gamma * it
    mean_n = np.sum(phase_rate * it) / et
    delta_n = np.sqrt(np.sum((phase_rate - mean_n)**2 * it) / et)

    disp = 1j * lin_operator
    mean_d = np.sum(disp * iw) / ew
    delta_d = np.sqrt(np.sum(np.abs(disp - mean_d)**2 * iw) / ew)

    spread = delta_d * delta_n
    if not np.isfinite(spread):
        raise NumericalDivergenceError(
            'The dispersion or nonlinear spread is not finite.')
    elif spread > 0:
        dz = tol**(1/3) / np.sqrt(spread)
    else:
        dz = np.inf

    if dz > remaining:
        dz = remaining
    return dz


def nonlinear_response(at, dz, gamma, dt, fo=None, fr=0, hrw=None):
    """The nonlinear increment over a step dz, evaluated at the field at.

    Includes the instantaneous Kerr response, the delayed Raman response
    (convolution of hr with |at|^2) and, if fo is given, self-steepening.
    """
    it = np.abs(at)**2
    if fr == 0:
        m = at * it
    else:
        convolution = ifft(hrw * fft(it))
        m = at * (1 - fr) * it + dt * at * fr * convolution

    k = -1j * dz * gamma * m
    if fo is not None:
        k = k - (dz * gamma / (2 * np.pi * fo)) * (1 / dt) * np.gradient(m)
    return k


def split_step(at, dz, lin_operator, gamma, dt, fo=None, fr=0, hrw=None,
               z=0):
    """Advance the field by one symmetric split step of length dz.

    The field is moved into the interaction picture by a linear half step,
    the nonlinearity is integrated over the full step with RK4, and the
    result is moved back by a second linear half step. The k1 increment is
    evaluated at the input field and half-stepped like the field itself;
    k4 is evaluated at the half-stepped field and is added after the second
    half step.

    Parameters
    ----------
    z : float
        The distance at the start of the step. Only used in error messages.

    Returns
    -------
    at : 1D complex array
        The field after the step, in the time domain.
    aw : 1D complex array
        fft(at).
    """
    def n(u):
        return nonlinear_response(u, dz, gamma, dt, fo=fo, fr=fr, hrw=hrw)

    halfstep = np.exp(lin_operator * dz / 2)
    _check_finite(halfstep, 'the linear half step', z)

    uip = ifft(halfstep * fft(at))

    k1 = ifft(halfstep * fft(n(at)))
    _check_finite(k1, 'RK4 stage k1', z)

    k2 = n(uip + k1/2)
    _check_finite(k2, 'RK4 stage k2', z)

    k3 = n(uip + k2/2)
    _check_finite(k3, 'RK4 stage k3', z)

    k4 = n(ifft(halfstep * fft(uip + k3)))
    _check_finite(k4, 'RK4 stage k4', z)

    at = ifft(halfstep * fft(uip + k1/6 + k2/3 + k3/3)) + k4/6
    _check_finite(at, 'the combined RK4 step', z)

    return at, fft(at)


class PropagationState:
    """Position and field of a propagation in progress."""

    def __init__(self, at, length):
        self.at = at
        self.aw = fft(at)
        self.z = 0.0
        self.dz = 0.0
        self.length = length

    @property
    def remaining(self):
        """Length left to propagate."""
        return self.length - self.z

    @property
    def done(self):
        return self.z >= self.length

    def advance(self, dz, at, aw):
        """Record a completed step. The last step lands exactly on length."""
        if dz >= self.remaining:
            self.z = self.length
        else:
            self.z = self.z + dz
        self.dz = dz
        self.at = at
        self.aw = aw


class TrajectoryLog:
    """Append-only record of the field along the fiber.

    Spectra are stored in centered order (lowest frequency first).
    """

    def __init__(self):
        self._z = []
        self._at = []
        self._aw = []

    def __len__(self):
        return len(self._z)

    def append(self, z, at, aw):
        self._z.append(z)
        self._at.append(np.copy(at))
        self._aw.append(to_centered(aw))

    def get_arrays(self):
        """Return z (1D) and AT, AW (2D, one row per position)."""
        return np.array(self._z), np.array(self._at), np.array(self._aw)


def print_progress(z, length, start_time=None):
    """Print the fraction of the fiber that has been covered."""
    if start_time is None:
        print('% 6.1f%% - %.3e m' % (z / length * 100, z))
    else:
        print('% 6.1f%% - %.3e m - %.1f seconds' % (
            z / length * 100, z, time.time() - start_time))


def propagate(u0, dt, length, alpha, dispersion, gamma, fo=None, tol=1e-5,
              raman_response=None, fr=0, trajectory=False, progress=None):
    """Propagate a field through a fiber with the adaptive SSFM.

    The units can be anything, as long as they are self consistent. E.g.,
    if |u|^2 is in Watts, the length in meters and dt in ps, then gamma is
    in 1/(W m), beta_n in ps^n/m and fo in THz.

    Parameters
    ----------
    u0 : 1D complex array of length N
        The input field on the centered time grid. N must be even.
    dt : float
        The time step.
    length : float
        The total propagation length.
    alpha : float or 1D array of length N
        The power loss coefficient, P = P0 * exp(-alpha * z). Arrays are in
        centered frequency order.
    dispersion : 1D array
        Taylor coefficients ``[beta0, ..., betam]``, or beta(w) on the N
        centered frequency points.
    gamma : float
        The nonlinear coefficient.
    fo : float or None
        The center frequency for self-steepening. None disables it.
    tol : float
        The convergence tolerance of the step-size criterion.
    raman_response : 1D array or None
        The time-domain Raman response on the centered time grid.
    fr : float
        The fractional Raman contribution. Requires raman_response if > 0.
    trajectory : boolean
        If True, the field is recorded after every step.
    progress : callable or None
        Called as ``progress(z, length)`` after every step.

    Returns
    -------
    at : 1D complex array
        The field at the end of the fiber.
    log : TrajectoryLog or None
        The recorded fields, including z = 0, if trajectory is True.
    """
    u0 = np.asarray(u0)
    if u0.ndim != 1:
        raise InvalidGridError('u0 must be 1D, got shape %s' % (u0.shape,))
    w, t = build_grid(u0.size, dt)

    if length < 0:
        raise ValueError('length must be >= 0, got %r' % length)
    if not tol > 0:
        raise ValueError('tol must be positive, got %r' % tol)
    if not 0 <= fr <= 1:
        raise ValueError('fr must be between 0 and 1, got %r' % fr)

    lin_operator = linear_operator(alpha, dispersion, w)

    if fr > 0:
        if raman_response is None:
            raise ValueError('fr > 0 requires a Raman response.')
        hrw = raman_kernel(raman_response, u0.size)
    else:
        hrw = None

    state = PropagationState(u0.astype('complex128'), length)
    log = TrajectoryLog() if trajectory else None
    if log is not None:
        log.append(state.z, state.at, state.aw)

    while not state.done:
        dz = estimate_step(state.at, state.aw, gamma, lin_operator, tol,
                           remaining=state.remaining)
        at, aw = split_step(state.at, dz, lin_operator, gamma, dt, fo=fo,
                            fr=fr, hrw=hrw, z=state.z)
        state.advance(dz, at, aw)

        if log is not None:
            log.append(state.z, state.at, state.aw)
        if progress is not None:
            progress(state.z, length)

    return state.at, log


def NLSE(u0, dt, fiber, tol=1e-5, trajectory=True, print_status=True,
         progress=None):
    """Propagate a pulse through a fiber object.

    This is a wrapper around :func:`propagate` that takes the medium from a
    :class:`upmssfm.fiber.Fiber` and packs the output into a
    :class:`PropagationResults` object.

    Parameters
    ----------
    u0 : 1D complex array
        The input field on the centered time grid.
    dt : float
        The time step.
    fiber : Fiber
        The medium.
    tol : float
        The convergence tolerance. 1e-5 works well.
    trajectory : boolean
        Record the field after every step. Needed for the z-evolution plots.
    print_status : boolean
        Print the propagation status after every step. Ignored when a
        progress callback is given.
    progress : callable or None
        Called as ``progress(z, length)`` after every step.

    Returns
    -------
    results : PropagationResults
    """
    u0 = np.asarray(u0)
    w, t = build_grid(u0.size, dt)

    if progress is None and print_status:
        start_time = time.time()

        def progress(z, length):
            print_progress(z, length, start_time)

    at, log = propagate(u0, dt, fiber.length, fiber.alpha, fiber.betas,
                        fiber.gamma, fo=fiber.fo, tol=tol,
                        raman_response=fiber.get_raman_response(t),
                        fr=fiber.fr, trajectory=trajectory, progress=progress)

    return PropagationResults(t, w, u0, at, log, fiber)


class PropagationResults:
    """Results of a propagation.

    Parameters
    ----------
    t : 1D array
        The centered time grid.
    w : 1D array
        The angular frequency grid in FFT order.
    at_in : 1D complex array
        The input field.
    at_out : 1D complex array
        The output field.
    log : TrajectoryLog or None
        The recorded trajectory.
    fiber : Fiber
        The fiber the pulse propagated through.
    """

    def __init__(self, t, w, at_in, at_out, log, fiber):
        self.t = t
        self.w = to_centered(w)
        self.at_in = at_in
        self.at_out = at_out
        self.fiber = fiber
        if log is None:
            self.z = np.array([0.0, fiber.length])
            self.AT = np.array([at_in, at_out])
            self.AW = to_centered(fft(self.AT, axis=1), axes=1)
        else:
            self.z, self.AT, self.AW = log.get_arrays()

    def get_results(self, data_type='amplitude'):
        """Get the propagation distances, grids and fields.

        ``'amplitude'`` - the complex fields.

        ``'intensity'`` - absolute value of the fields squared.

        ``'dB'`` - intensity on a 10*log10 scale.

        Returns
        -------
        z : 1D array
            The positions along the fiber.
        w : 1D array
            The angular frequency grid, centered order.
        t : 1D array
            The time grid.
        AW : 2D array
            The spectrum at every position, centered order.
        AT : 2D array
            The time-domain field at every position.
        """
        if data_type == 'amplitude':
            AW, AT = self.AW, self.AT
        elif data_type == 'intensity':
            AW = np.abs(self.AW)**2
            AT = np.abs(self.AT)**2
        elif data_type == 'dB':
            AW = dB(self.AW)
            AT = dB(self.AT)
        else:
            raise ValueError('data_type not recognized.')

        return self.z, self.w, self.t, AW, AT

    def plot(self, units='dB', wlim=None, tlim=None, show=True):
        """Plot the results in both the time and frequency domain.

        Parameters
        ----------
        units : 'dB' or 'intensity'
            Units for the plots.
        wlim, tlim : tuple or None
            The x-limits of the frequency and time plots.
        show : boolean
            determines if plt.show() will be called to show the plot

        Returns
        -------
        fig : matplotlib.figure object
        axs : a 2x2 array of axes objects
        """
        if units not in ('dB', 'intensity'):
            raise ValueError('Units not recognized.')

        z, w, t, IW, IT = self.get_results(data_type=units)

        fig = plt.figure(figsize=(8, 8))
        ax0 = plt.subplot2grid((3, 2), (0, 0), rowspan=1)
        ax1 = plt.subplot2grid((3, 2), (0, 1), rowspan=1)
        ax2 = plt.subplot2grid((3, 2), (1, 0), rowspan=2, sharex=ax0)
        ax3 = plt.subplot2grid((3, 2), (1, 1), rowspan=2, sharex=ax1)

        ax0.plot(w, IW[0], color='b', label='Initial')
        ax1.plot(t, IT[0], color='b', label='Initial')
        ax0.plot(w, IW[-1], color='r', label='Final')
        ax1.plot(t, IT[-1], color='r', label='Final')
        ax1.legend(loc='upper left', fontsize=9)

        if units == 'dB':
            clof, chif = np.max(IW) - 50, np.max(IW)
            clot, chit = np.max(IT) - 80, np.max(IT)
            ax0.set_ylim(clof - 10, chif + 10)
            ax1.set_ylim(clot - 10, chit + 10)
        else:
            clof, chif = np.min(IW), np.max(IW)
            clot, chit = np.min(IT), np.max(IT)

        extw = (np.min(w), np.max(w), np.min(z), np.max(z))
        extt = (np.min(t), np.max(t), np.min(z), np.max(z))

        # pcolormesh handles the uneven z spacing of the adaptive steps
        ax2.pcolormesh(w, z, IW, vmin=clof, vmax=chif, shading='auto')
        ax3.pcolormesh(t, z, IT, vmin=clot, vmax=chit, shading='auto')
        ax2.set_ylim(extw[2], extw[3])
        ax3.set_ylim(extt[2], extt[3])

        ax0.set_ylabel('Intensity (%s)' % units)
        ax1.set_ylabel('Intensity (%s)' % units)
        ax2.set_xlabel('Angular frequency')
        ax3.set_xlabel('Time')
        ax2.set_ylabel('Propagation distance')

        if wlim is not None:
            ax2.set_xlim(*wlim)
        if tlim is not None:
            ax3.set_xlim(*tlim)

        for ax in (ax0, ax1):
            ax.grid(alpha=0.1, color='k')

        fig.tight_layout()

        if show:
            plt.show()

        axs = np.array([[ax0, ax1], [ax2, ax3]])
        return fig, axs
