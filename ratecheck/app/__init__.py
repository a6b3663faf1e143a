"""
Application package for the rate-limit isolation harness.

Structure:
- app.main: CLI entry point.
- app.adapters: HTTP clients for the auth service and the gateway.
- app.timing: Window alignment.
- app.scenario: Scenario orchestration and isolation checks.
- app.reporting: Summary output and exit status.
- app.domain: Value types shared by the above.
"""
