"""
Commission and earning-eligibility engine.

Computes per-task rewards, decides daily earning eligibility, assigns daily
tasks and writes task rewards plus their sponsor commission cascade to the
ledger as one atomic unit.
"""

__version__ = "1.0.0"
