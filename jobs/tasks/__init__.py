"""
Task handlers dispatched by the scheduler.
"""
