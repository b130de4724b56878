"""Backends for threshold identification.

- z3: ``z3.Optimize`` over integer variables

Each backend implements ``blnverify.threshold.solver.ThresholdSolver`` and is
imported on demand, so a missing optional solver only matters when it is used.
"""
