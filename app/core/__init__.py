"""
Core components shared by every domain: base exceptions, value object
primitives and logging/validation utilities.
"""
