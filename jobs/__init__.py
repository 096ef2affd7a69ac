"""
Background reconciliation process: scheduler, task handlers, health server.
"""
