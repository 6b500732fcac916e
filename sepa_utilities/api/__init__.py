"""HTTP API routers for the SEPA validation service."""
