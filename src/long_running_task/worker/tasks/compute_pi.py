import time

from mpmath import MPContext

from long_running_task.setup.worker_config import get_worker_settings
from long_running_task.worker.executor import ProgressReporter

_settings = get_worker_settings()


def get_pi(digits: int) -> str:
    # Jobs share threads, so each call gets its own precision context.
    ctx = MPContext()
    ctx.dps = digits
    return str(ctx.pi)


def compute_pi(reporter: ProgressReporter, digits: int) -> str:
    """
    Pi computation job.
    Simulates heavy pi calculation, reporting progress per digit.
    """
    pi: str = get_pi(digits)

    for k in range(digits):
        time.sleep(_settings.SLEEP_PER_DIGIT_SEC)
        reporter.report(k + 1, digits)

    return pi
