"""
Authorization Engine - embeddable RBAC + ABAC decision engine

Role-based grants with wildcard permissions, hierarchical scope
constraints, attribute-based conditions, and time-bounded, revocable
role assignments, evaluated in a single deterministic pass.
"""

__version__ = "0.1.0"
