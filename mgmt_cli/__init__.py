"""
Interactive shells for the three management systems.

Each shell is a set of plain functions over one service: ``vehicle_tax``,
``tax_enforcement`` and ``internship``; ``main`` picks one from the command
line.  Input helpers live in ``util`` and menu printing in ``menu``.
"""
