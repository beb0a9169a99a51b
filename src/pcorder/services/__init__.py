"""Service layer: operations over a Shop, returning ServiceResult.

Services may import from domain and plugins.
They must never import from commands or output.
"""
