import os
import unittest
from unittest import mock

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

try:
    from interpretreflect.services.side_writes import retry_countdown
    from interpretreflect.tasks import side_write_tasks
    from interpretreflect.tasks.side_write_tasks import run_side_write_task

    DEPENDENCIES_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - environment dependent
    DEPENDENCIES_AVAILABLE = False


@unittest.skipUnless(DEPENDENCIES_AVAILABLE, "celery/sqlalchemy dependencies are not installed")
class RunSideWriteTaskTests(unittest.TestCase):
    def test_success_returns_runner_result(self) -> None:
        with mock.patch.object(side_write_tasks, "SideWriteRunner") as runner_cls:
            runner_cls.return_value.run.return_value = {"jobId": "job-1", "status": "completed"}
            result = run_side_write_task.apply(args=["job-1"])

        self.assertTrue(result.successful())
        self.assertEqual(result.result["status"], "completed")
        runner_cls.return_value.run.assert_called_once_with("job-1", task_id=result.id)

    def test_retries_with_backoff_then_gives_up(self) -> None:
        countdowns = []

        def recording_countdown(retries):
            value = retry_countdown(retries)
            countdowns.append(value)
            return value

        max_retries = run_side_write_task.max_retries
        with mock.patch.object(side_write_tasks, "SideWriteRunner") as runner_cls, mock.patch.object(
            side_write_tasks, "retry_countdown", side_effect=recording_countdown
        ):
            runner_cls.return_value.run.side_effect = RuntimeError("store unavailable")
            with self.assertLogs("interpretreflect.tasks.side_write_tasks", level="ERROR") as logs:
                result = run_side_write_task.apply(args=["job-1"])

        self.assertTrue(result.failed())
        self.assertIsInstance(result.result, RuntimeError)
        self.assertEqual(countdowns, [retry_countdown(n) for n in range(max_retries)])
        self.assertEqual(countdowns[:3], [10, 20, 40])
        self.assertEqual(runner_cls.return_value.run.call_count, max_retries + 1)
        self.assertIn(f"gave up after {max_retries} retries", logs.output[0])


if __name__ == "__main__":
    unittest.main()
