"""
Document Validator — is this the current version of the document?

Architecture: Registry (JSON) → Lookup → Lineage resolution → Status
Philosophy:  Resolution is pure. Only the registry step touches I/O.
"""

__version__ = "1.0.0"
