"""
Database integrations for BallotBase.
"""
