"""
Personal task list manager.

Packages:
- tasks: task model, codec, filter predicate and the TaskStore
- storage: persistence gateways (JSON file, SQLite)
- core: ports, errors and presentation state
- cli / connectors: composition root and the interactive console
"""
