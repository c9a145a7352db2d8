"""
Seawater equation of state.

UNESCO (EOS-80) one-atmosphere density of seawater as a function of
temperature [°C] and practical salinity [psu].
"""

import numpy as np
from numpy.typing import NDArray


# Pure water density polynomial in T
_RHO_W = (999.842594, 6.793952e-2, -9.095290e-3, 1.001685e-4, -1.120083e-6, 6.536332e-9)
# Salinity terms
_B = (8.24493e-1, -4.0899e-3, 7.6438e-5, -8.2467e-7, 5.3875e-9)
_C = (-5.72466e-3, 1.0227e-4, -1.6546e-6)
_D = 4.8314e-4


def _poly(coeffs, T: NDArray) -> NDArray:
    result = np.zeros_like(T, dtype=np.float64)
    for c in reversed(coeffs):
        result = result * T + c
    return result


def eqn_of_state(temp: NDArray, salt: NDArray) -> NDArray:
    """
    Density [kg/m³] at atmospheric pressure.

    Args:
        temp: Temperature [°C]
        salt: Salinity [psu]
    """
    T = np.asarray(temp, dtype=np.float64)
    S = np.asarray(salt, dtype=np.float64)

    rho_w = _poly(_RHO_W, T)
    return rho_w + S * _poly(_B, T) + S**1.5 * _poly(_C, T) + _D * S**2


def density_anomaly(temp: NDArray, salt: NDArray, rho_0: float) -> NDArray:
    """Normalised density (rho - rho_0) / rho_0, the convention of raw `rho` output."""
    return (eqn_of_state(temp, salt) - rho_0) / rho_0
