"""Service layer: commands, queries, their handlers and the message bus.

Entry points talk to the application only through `MessageBus.handle`.
"""
