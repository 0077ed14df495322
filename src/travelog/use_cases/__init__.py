"""Use-case level logic.

These modules turn the travel-log export into month tabs:
- trip_ingest: sanitize + parse the export
- trip_grouping: month keys and display rows
- sheet_reconcile: find-or-create, clear, write, sort

Only sheet_reconcile talks to the remote spreadsheet, and only through
the client it is given.
"""
