"""
FastAPI Donation Relay Application

This middleware sits between the Saweria donation webhook and the polling game
client, buffering recent donations in memory and serving them by cursor.
"""

__version__ = "1.0.0"
