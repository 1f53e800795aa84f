"""Reporting collaborators.

- prompts.py: CRO report and client-analysis prompts
- generator.py: text-generation client (generate(prompt) -> html)
- store.py: per-user report persistence (save/list/get/update/delete)
- client.py: client profile and bank materiality decisions
"""
