"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, LoadStatus)
- task_codec.py: JSON (de)serialization of the whole collection
- task_filter.py: filter selectors and the pure match predicate
- task_store.py: in-memory collection + ordered write-back through a gateway
"""
