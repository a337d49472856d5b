"""
REST API for the HR Lifecycle Engine.
"""
