"""
Orbit Propagation Package
=========================

Provides numerical integration of the N-body equations of motion.
"""

from .propagator import propagate, propagate_n_body, run_n_body_propagation

__all__ = ['propagate', 'propagate_n_body', 'run_n_body_propagation']
