"""Core interfaces/abstractions.

Contracts (Protocol) implemented by concrete adapters, so the core depends
on abstractions and never on httpx directly.
"""
