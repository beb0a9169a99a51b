"""Domain layer: cards, customers, PC models, orders, and the ledger.

This layer depends only on stdlib.
It must never import from services, plugins, commands, or config.
"""
