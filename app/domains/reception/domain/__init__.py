"""
Reception Domain Layer

Value objects and domain services for clinical intake.
"""
