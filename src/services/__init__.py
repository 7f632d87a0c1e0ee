"""
Application services layer (use cases).

Services orchestrate the domain logic to fulfill application use cases.
Every read-modify-write of a storage document runs inside one lock
scope of the document store.

This layer contains:
- catalog/ : categories, movies, series and the series merge engine
- users/ : accounts, watch history and audit trail

Services depend on ports (interfaces) from core/, the storage layout
maps their records to files.
"""
