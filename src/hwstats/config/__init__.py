"""
Environment configuration, logging setup and worker scaling.
"""
