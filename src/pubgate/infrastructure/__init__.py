"""Infrastructure layer — filesystem, content stores, images, link graph.

Infrastructure may import from domain and config, never from services,
commands, or output.
"""
