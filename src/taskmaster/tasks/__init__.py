"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, ViewCriteria and its enums)
- task_store.py: ordered collection + write-through mutations
- task_view.py: filter/sort projection (pure) + memoising projector
- task_api.py: inbound UI intents mapped onto the store and session state
"""
