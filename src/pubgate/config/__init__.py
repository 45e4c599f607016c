"""Configuration layer — settings, guideline rulesets, logging."""
