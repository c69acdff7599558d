"""
Infrastructure Package
======================

Provides abstraction layers for external dependencies following the Dependency Inversion Principle.

Modules:
    - events: Domain event transport (Redis pub/sub)
    - notifications: Notification sender abstraction (event bus, mock)
    - container: Service locator wiring infrastructure and marketplace services

This package enables:
    - Easy testing with mock implementations
    - Switching between providers without code changes
"""
