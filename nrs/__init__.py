"""
nrs - New Relic Synthetics client and resource reconciler.

Async API client for synthetic monitors, monitor scripts and alert
conditions, plus the reconcilers that map declarative resource records
onto those API calls.
"""

__version__ = "0.1.0"
