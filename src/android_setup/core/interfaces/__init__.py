"""Core interfaces/abstractions.

Why:
- Defines the contracts (Protocol) implemented by concrete adapters.
- Inverts dependencies: the pipeline depends on abstractions, tests on fakes.
"""
