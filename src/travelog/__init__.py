"""Sync a travel-log export into a Google spreadsheet, one tab per month."""
