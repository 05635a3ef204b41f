"""Request dispatch: pipeline, return-value negotiation, error mapping, ASGI send."""
