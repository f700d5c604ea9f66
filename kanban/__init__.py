"""
Kanban board backend: authentication, task CRUD and team lookup over REST.
"""

__version__ = "0.1.0"
