"""Model Layer - operation surface shared by public and internal models.

Invariants:
    - Models are declared by the host application as Base + ActiveRecord subclasses
"""
