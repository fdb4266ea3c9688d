"""
Core business logic for client management and billing.

This package is framework-agnostic - it doesn't import FastAPI, Snowflake,
or any infrastructure concerns. Everything here is a pure function or a
plain dataclass, so billing and availability rules can be tested in
isolation.
"""
