"""Higher-order soliton fission in a photonic crystal fiber with Raman.

Fiber parameters are those of Fig. 3 of Dudley et. al, RMP 78 1135 (2006),
with a lower peak power so that the input is a third-order soliton.
"""

import numpy as np
import matplotlib.pyplot as plt
import upmssfm as us

npts = 2**12
dt = 12.5 / npts  # ps
w, t = us.tools.build_grid(npts, dt)

# betas = [beta0, beta1, beta2, ...] in units [1/m, ps/m, ps^2/m, ...]
betas = [0, 0, -11.830e-3, 8.1038e-5, -9.5205e-8, 2.0737e-10]
gamma = 0.11  # 1/(W m)
t0 = 0.0284   # ps

power = 9 * abs(betas[2]) / (gamma * t0**2)  # N = 3
u0 = us.pulse.sech(t, power=power, t0=t0)

f = us.Fiber(length=0.05, dispersion=betas, gamma=gamma,
             fo=us.tools.wavelength_to_frequency(835), raman=True)

r = us.NLSE(u0, dt, f, tol=1e-5)
z, w, t, AW, AT = r.get_results(data_type='dB')

print('Soliton order: %.2f' % us.pulse.soliton_order(power, t0, betas[2],
                                                     gamma))
print('Steps taken: %i' % (z.size - 1))

if __name__ == '__main__':  # make plots if we're not running tests
    r.plot(wlim=(-150, 150), tlim=(-1, 2), show=False)

    fig, ax = plt.subplots(figsize=(5, 4), tight_layout=True)
    ax.plot(z[1:], np.diff(z), marker='.')
    ax.set_xlabel('Propagation distance (m)')
    ax.set_ylabel('Step size (m)')
    plt.show()
