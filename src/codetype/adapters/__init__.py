"""Adapters (outbound) for CODETYPE.

Concrete implementations of the ports in `codetype.interfaces`: SQLAlchemy
storage and migrations, an in-memory history store, the HTTP identity
provider admin client, ID generators and the unit of work.
"""
