"""
Configuration: settings, constants and database session factory.
"""
