"""
Utility helpers for the Deal Feed system: structured logging and error
tracking.
"""
