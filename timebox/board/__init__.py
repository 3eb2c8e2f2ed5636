"""
TIMEBOX Board - client-side task board

API client, optimistic session and polling refresh.
"""

from timebox.board.client import TasksApiClient
from timebox.board.poller import BoardPoller
from timebox.board.session import BoardSession

__all__ = ["TasksApiClient", "BoardSession", "BoardPoller"]
