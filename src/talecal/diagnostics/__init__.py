"""Diagnostics package.

Light-weight command-line checks and tables; ``holiday_scatter`` additionally
needs the ``diagnostics`` extra (numpy, matplotlib).
"""

__all__ = ["pretty_unit", "holiday_table", "round_trip", "holiday_scatter"]
