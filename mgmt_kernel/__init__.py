"""
Management Kernel

Shared primitives for the three management systems:
- Typed exceptions with machine-readable codes
- Structured JSON logging
- Injectable clock
- Field validation helpers
- Append-only registries
- Status workflows
"""

__version__ = "0.1.0"
