"""Service layer — validation, fixers and the publishing pipeline.

Services may import from domain, validators, config and infrastructure.
They must never import from commands or output.
"""
