"""Direct-summation N-body integrator with a parallel leapfrog kernel.

This package provides Numba-accelerated drift/kick kernels over a flat,
stride-addressed particle buffer, a softened pairwise gravity evaluator and
a raw snapshot writer.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
