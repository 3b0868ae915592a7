"""
Shared Kernel

Base classes and value objects used by every domain app of the
parking marketplace: entities, aggregates, domain events, the unit of
work and the message bus.
"""
