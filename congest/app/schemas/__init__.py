"""
Pydantic schema definitions for API payloads.

Schemas describe what the HTTP layer accepts and returns.  The
scheduling engine consumes ``ServiceDefinition`` directly; everything
else here is response formatting.
"""
