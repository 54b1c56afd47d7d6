"""
HTTP API for the appraisal engine.
"""
