"""
Management modules: vehicle tax, tax enforcement and internship placement.

Each module follows the same layout: ``config`` (dataclass settings),
``models`` (validated entity hierarchy), ``service`` (session registries and
operations).  Modules depend on ``mgmt_kernel`` only, never on each other.
"""
