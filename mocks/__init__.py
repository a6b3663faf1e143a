"""
Mock external services used by the harness integration tests.
"""
