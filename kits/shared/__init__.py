"""
KITS Shared — settings, logging, errors and small helpers used everywhere.
"""
