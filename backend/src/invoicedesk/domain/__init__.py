"""
Domain package - Core business logic with no external dependencies.

This package contains pure Python domain models and the derived-state
engines (status, aggregation, query) for invoice tracking. Every function
here takes "today" as an explicit argument and never reads the clock.
"""
