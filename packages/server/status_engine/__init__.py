"""
Status Engine

Organization rosters with role-based, PII/PHI-aware access control and an
access-request approval workflow.
"""

__version__ = "0.1.0"
