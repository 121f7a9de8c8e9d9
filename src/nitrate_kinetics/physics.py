import numpy as np

from .constants import MOLAR_MASS


def particle_diameter(mass, density):
    """Sphere diameter from mass and constant density: d = (6m/(pi*rho))^(1/3)"""
    if mass <= 0.0:
        return 0.0
    return (6.0 * mass / (np.pi * density)) ** (1.0 / 3.0)


def particle_surface_area(diameter):
    """External sphere area pi*d^2 [m^2]"""
    return np.pi * diameter ** 2


def concentration_kmol(rho, y, species):
    """Molar concentration [kmol/m^3] from density and mass fraction: rho*y/MW"""
    return rho * max(y, 0.0) / MOLAR_MASS[species]


def calculate_gas_viscosity(T):
    """Sutherland law for air-like gas (Pa*s)"""
    mu_ref = 1.781e-5
    T_ref = 273.15
    S = 111.0
    return mu_ref * (T/T_ref)**1.5 * (T_ref + S) / (T + S)


def calculate_gas_conductivity(T):
    """Sutherland-type conductivity for air-like gas (W/(m*K))"""
    k_ref = 0.0241
    T_ref = 273.15
    S = 194.0
    return k_ref * (T/T_ref)**1.5 * (T_ref + S) / (T + S)


def ranz_marshall_coefficient(d_p, T_gas, rho_gas, slip_velocity, cp_gas=1200.0):
    """
    Convective heat-transfer coefficient from the Ranz-Marshall correlation.
    Nu = 2 + 0.6 * Re^0.5 * Pr^(1/3)

    Args:
        d_p (float): Particle diameter [m]
        T_gas (float): Gas temperature [K]
        rho_gas (float): Gas density [kg/m^3]
        slip_velocity (float): |u_gas - u_particle| [m/s]
        cp_gas (float): Gas specific heat [J/(kg*K)]

    Returns:
        float: h [W/(m^2*K)]
    """
    if d_p <= 0.0:
        return 0.0
    mu = calculate_gas_viscosity(T_gas)
    k_g = calculate_gas_conductivity(T_gas)
    Re = rho_gas * abs(slip_velocity) * d_p / mu
    Pr = cp_gas * mu / k_g
    Nu = 2.0 + 0.6 * (Re**0.5) * (Pr**(1/3.0))
    return Nu * k_g / d_p
