"""
API server package: HTTP interface of the gasless relay.

Validates transfer requests, delegates to the relay service, and renders
every failure as a structured JSON error.
"""
