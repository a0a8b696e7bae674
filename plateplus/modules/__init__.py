"""
Configuration and export modules.
"""
