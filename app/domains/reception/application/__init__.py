"""
Reception Application Layer

Ports, DTOs, services and use cases for intake validation.
"""
