"""Environment-driven configuration. See `riskpaths/config/env.py`."""
