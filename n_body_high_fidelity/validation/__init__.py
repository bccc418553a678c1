"""
Validation Package
==================

Test suite for the N-body propagator.

Modules:
--------
- test_scaling        : Scaling round trips and variational unit conversions
- test_dynamics       : Equations of motion and variational equations
- test_configuration  : Problem validation and YAML loading
- test_body_constants : Body constants lookup
- test_loader         : SPICE kernel discovery
- test_propagator     : Propagation with analytic ephemerides
- test_utility        : Console log capture and time formatting
- test_regression     : Reference scenarios (require SPICE kernels)

Usage:
------
Run all tests:
  python -m pytest n_body_high_fidelity/validation/ -v

Run the reference scenarios against a local kernel folder:
  N_BODY_SPICE_KERNELS=/path/to/kernels python -m pytest n_body_high_fidelity/validation/test_regression.py -v
"""
