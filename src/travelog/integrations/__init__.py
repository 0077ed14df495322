"""Integration adapters for Google (auth + Sheets API).

Keep these modules small and testable:
- No CSV parsing or grouping
- Pure IO + A1 helpers
"""
