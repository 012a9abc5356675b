"""Dashboard Backend Package

FastAPI-based REST API for the LifeOS dashboard.
"""
