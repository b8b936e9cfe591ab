"""
Services module for business logic separation.

Holds the short link facade, code generator, expiry policy, audit logger
and background helpers, keeping them separate from the HTTP layer and
the store.
"""
