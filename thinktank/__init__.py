"""
Think Tank Content Platform

Publications, policies, events and memberships behind one
authorization-aware content layer.
"""

__version__ = "1.0.0"
