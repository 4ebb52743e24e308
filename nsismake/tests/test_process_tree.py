import subprocess
import sys
import unittest

from nsismake.util.process_tree import kill_process_tree


class TestKillProcessTree(unittest.TestCase):
    def test_kills_parent_and_children(self):
        # The parent starts a sleeping child of its own and then sleeps too
        code = (
            "import subprocess, sys, time; "
            "subprocess.Popen([sys.executable, '-c', 'import time; time.sleep(60)']); "
            "time.sleep(60)"
        )
        process = subprocess.Popen([sys.executable, "-c", code])
        try:
            kill_process_tree(process.pid)
            self.assertIsNotNone(process.wait(timeout=10))
        finally:
            if process.poll() is None:
                process.kill()

    def test_finished_process_is_ignored(self):
        process = subprocess.Popen([sys.executable, "-c", "pass"])
        process.wait(timeout=30)
        kill_process_tree(process.pid)


if __name__ == "__main__":
    unittest.main()
