"""Core domain: entities, ports, services and exceptions."""
