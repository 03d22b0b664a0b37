"""
Application layer: use-case services orchestrating the core and boundary layers.
"""
