"""
TIMEBOX API - Tasks Module

Task board classification and CRUD.
"""

from timebox.tasks.router import router as tasks_router

__all__ = ["tasks_router"]
