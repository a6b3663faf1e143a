"""
Rate-limit isolation harness.

Checks that a gateway enforces request quotas independently per
(service, caller identity) pair within one fixed-length window.
"""
