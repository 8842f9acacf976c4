"""Task manager — background job processing and cron scheduling.

Provides ``TaskManager`` for periodic background tasks, currently the
``reconcile_pending_transactions`` job that settles pending records against
their on-chain confirmation status.
"""

from __future__ import annotations

from sol_dashboard.taskmanager.manager import CronJob, TaskManager

__all__ = ["CronJob", "TaskManager"]
