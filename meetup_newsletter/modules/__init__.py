"""
Newsletter Modules
==================

One Flask blueprint per module: subscribers, events, broadcast.
The email module is a plain service with no routes.
"""

__all__ = ['subscribers', 'events', 'email', 'broadcast']
