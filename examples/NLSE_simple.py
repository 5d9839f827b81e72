"""Runs a simple example of adaptive split-step propagation."""

import upmssfm as us

dt = 0.1
w, t = us.tools.build_grid(256, dt)
u0 = us.pulse.gaussian(t, power=1, t0=1)

# pure anomalous group velocity dispersion, beta2 = -1
at, log = us.propagate(u0, dt, 1, alpha=0, dispersion=[0, 0, -1], gamma=1,
                       tol=1e-5, trajectory=True,
                       progress=us.nlse.print_progress)

print('Energy in:  %.8f' % us.tools.energy(u0, dt))
print('Energy out: %.8f' % us.tools.energy(at, dt))

if __name__ == '__main__':  # make plots if we're not running tests
    import matplotlib.pyplot as plt
    z, AT, AW = log.get_arrays()
    plt.plot(t, abs(u0)**2, label='Initial')
    plt.plot(t, abs(at)**2, label='Final')
    plt.xlabel('Time (ps)')
    plt.legend()
    plt.show()
