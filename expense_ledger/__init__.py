"""Command-line front end for the expense ledger."""
