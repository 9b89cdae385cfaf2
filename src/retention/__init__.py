"""
Release retention: decide which deployed releases to keep.

Given projects, environments, releases and deployments, keeps the N most
recently deployed releases per (project, environment) pair and explains
every decision in a machine-readable log.
"""

__version__ = "0.1.0"
