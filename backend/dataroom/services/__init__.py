"""Collaborator adapters for the workspace core.

- identity.py: StaticIdentity (single-user MVP)
- memory_persistence.py: MemoryPersistence
- sql_persistence.py: SqlPersistence over the repositories
- object_storage.py: MemoryObjectStorage, LocalObjectStorage
- url_signing.py: UrlSigner for expiring download links
"""
