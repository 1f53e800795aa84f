"""HTTP surface (Flask) and pipeline orchestration.

- orchestrator.py: parse -> match -> summarize, report generation + persistence
- server.py: upload/match, taxonomy and report endpoints
"""
