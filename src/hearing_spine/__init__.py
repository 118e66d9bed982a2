"""
hearing-spine: normalization and artefact pipeline for court hearing lists.

Converts uploaded spreadsheets to JSON, validates inbound publications,
stores artefacts safely on disk and serves the Single Justice Procedure
press and public lists with search, filtering, pagination and CSV export.
"""

__version__ = "0.1.0"
