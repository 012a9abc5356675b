"""Security - session tokens for the LifeOS dashboard

Components:
    session.py: Create, validate, refresh and revoke session tokens
"""
