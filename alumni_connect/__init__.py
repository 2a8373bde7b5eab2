"""
Alumni Connect - Messaging Service
Direct messaging between students, alumni and placement admins.

Architecture:
- Relational store (PostgreSQL / SQLite): users and messages
- Services: contact directory, conversation aggregation, message threads
- FastAPI: JSON API consumed by the single-page front-end
"""

__version__ = "1.0.0"
