"""Global constants for sqlenrich.

Centralizes the magic numbers and default names used throughout the codebase,
making them discoverable, consistent, and easy to modify.
"""

# =============================================================================
# Severity Class Thresholds
# =============================================================================
# SQL Server error classes run from 1 to 25. Each constant is the highest
# class value that still maps to the named level.

SEVERITY_INFORMATIONAL_MAX = 10
"""Classes 1-10: status information, not errors."""

SEVERITY_WARNING_MAX = 13
"""Classes 11-13: warnings and user-correctable issues."""

SEVERITY_ERROR_MAX = 16
"""Classes 14-16: user errors."""

SEVERITY_SEVERE_MAX = 19
"""Classes 17-19: software or hardware errors needing an administrator."""

SEVERITY_CRITICAL_MAX = 24
"""Classes 20-24: system errors that terminate the connection."""

SEVERITY_IMMEDIATE_ATTENTION_MIN = 20
"""Lowest class that requires immediate attention."""

SEVERITY_CLASS_MIN = 0
SEVERITY_CLASS_MAX = 255
"""Error class is a single unsigned byte on the wire."""

# =============================================================================
# Property Naming
# =============================================================================

DEFAULT_PROPERTY_PREFIX = "SqlException_"
"""Prefix applied to every enriched key when semantic conventions are off."""

# =============================================================================
# Deadlock Graphs
# =============================================================================

DEADLOCK_GRAPH_ROOT = "deadlock-list"
"""Root element of the deadlock graph XML that may be embedded in a message."""
