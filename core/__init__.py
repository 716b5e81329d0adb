"""
Core services for PlayerSync: configuration persistence, logging setup and the sync event log.
"""
