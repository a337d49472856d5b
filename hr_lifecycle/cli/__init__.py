"""
Command line interface for the HR Lifecycle Engine.
"""
