"""
Reception Domain

Clinical intake validation: severity classification, registry-gated
business rules, workflow transition guarding and multi-stage validation of
intake requests.

Architecture:
- domain/: Value objects, rule tables and the severity classifier
- application/: Ports, DTOs, rule services and use cases
- infrastructure/: YAML rule loading and in-memory adapters

Use cases are NOT imported here to keep imports of the domain layer light.
Import directly from: app.domains.reception.application.use_cases
"""

__all__: list[str] = []
