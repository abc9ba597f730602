"""REST API for Gatekeeper policy authoring."""
