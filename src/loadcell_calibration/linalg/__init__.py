"""Small dense linear algebra public API."""

# Re-export the stable interfaces so imports stay clean.

from .elimination import (  # Re-export solver utilities from the elimination module.
    SIZE,
    SingularMatrixError,  # Share the singular-system error at package level.
    determinant_4x4,  # Share the determinant diagnostic.
    solve_4x4,  # Share the 4x4 solver.
)

__all__ = [  # Define the public symbols for this package.
    "SIZE",  # Fixed system dimension.
    "SingularMatrixError",  # Error raised for zero pivots.
    "determinant_4x4",  # Pivoted determinant helper.
    "solve_4x4",  # Pivoted Gaussian elimination solver.
]
