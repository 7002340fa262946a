"""
Shared Kernel

Domain-event plumbing and value objects shared by the domain apps.
"""
