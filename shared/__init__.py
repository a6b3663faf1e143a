"""
Shared utilities for the rate-limit isolation harness.

This package aggregates common building blocks used by the harness and the
mock gateway:

- config: Harness configuration via pydantic-settings
- logging: Structured logging with run correlation
- metrics: Prometheus collectors for classified outcomes
- errors: Canonical error types and responses
- test_helpers: Fakes for clocks, sleepers and gateway transports

Do not import from ratecheck or mocks into shared/.
"""
