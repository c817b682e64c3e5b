"""
Edit reconciliation for the statistical data quality dashboard.
"""
