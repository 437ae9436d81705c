"""Export helpers (CSV trial table and PNG graph snapshot).

Utility modules here keep disk-level concerns isolated from the rest of the
application:
- :mod:`trial_export` writes the accepted-trial table as CSV.
- :mod:`snapshot` renders the force, velocity, and fit graphs to PNG.
"""
