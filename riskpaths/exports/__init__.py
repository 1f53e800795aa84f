"""Exports: CSV writers and Markdown summaries of match sets.

- writers.py: CSV emitters with fixed column schemas
- reports.py: match summary Markdown
"""
