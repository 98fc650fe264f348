"""
Music Vote Manager - Session-authenticated music voting app.

A small FastAPI service for adding, editing, deleting and voting on music
pieces.  Users and music are held in process memory; there is no database.
"""
