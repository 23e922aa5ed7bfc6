"""
Variable resolution and substitution module.
Layered property namespaces and ${name} placeholder filtering.
"""

from .namespace import PropertyNamespace
from .substitution import SubstitutionEngine, apply

__all__ = ['PropertyNamespace', 'SubstitutionEngine', 'apply']
