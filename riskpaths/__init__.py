"""ESG materiality to credit-risk pathway matching.

- taxonomy: embedded risk pathways and the hierarchical risk taxonomy
- materiality: JSON/CSV materiality file parser
- matching: tiered text-similarity engine and summary reducer
- reports: prompts, text generation client, report persistence
- exports: CSV and Markdown writers
- api: Flask service and pipeline orchestration
"""

__version__ = "0.1.0"
