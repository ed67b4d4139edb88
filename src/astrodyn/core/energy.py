"""
Energy integrals of the CR3BP.

The Jacobi constant C relates to the rotating-frame energy by C = -2E.
"""

import numpy as np


def crtbp_energy(state, mu):
    """
    Energy (Hamiltonian) of a rotating-frame state.

    Parameters
    ----------
    state : array_like
        State vector [x, y, z, vx, vy, vz] in the rotating frame
    mu : float
        Mass parameter of the CR3BP system (ratio of smaller to total mass)

    Returns
    -------
    float
        The energy value, conserved along any CR3BP trajectory
    """
    x, y, z, vx, vy, vz = np.asarray(state, dtype=np.float64)
    mu1 = 1.0 - mu
    mu2 = mu

    r1 = np.sqrt((x + mu2)**2 + y**2 + z**2)
    r2 = np.sqrt((x - mu1)**2 + y**2 + z**2)

    kin = 0.5 * (vx*vx + vy*vy + vz*vz)
    pot = -(mu1 / r1) - (mu2 / r2) - 0.5*(x*x + y*y) - 0.5*mu1*mu2
    return float(kin + pot)


def energy_to_jacobi(energy):
    return -2.0 * energy


def jacobi_to_energy(jacobi):
    return -0.5 * jacobi


def jacobi_constant(state, mu):
    """Jacobi constant C = -2E of a rotating-frame state."""
    return energy_to_jacobi(crtbp_energy(state, mu))
