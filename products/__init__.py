"""
Products module - Django persistence for brand products.

Product domain logic lives in the brands module; this app only owns
the table.
"""
