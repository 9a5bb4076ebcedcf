"""Test suite for signupform.

This package contains tests for:
- Field schema construction and JSON Schema export
- Validation engine (rule kinds, last-failure-wins, registration schema)
- Status state machine transitions
- Event system (emission, serialization)
- Controller scenarios (edit lifecycle, submit success/failure, concurrency)
"""
