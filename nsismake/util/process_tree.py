import logging

import psutil


logger = logging.getLogger(__name__)


def kill_process_tree(pid: int) -> None:
    """Kill a process and all its children.

    makensis may spawn helpers through `!system`/`!execute`; those must not
    outlive an interrupted build.
    """
    try:
        parent = psutil.Process(pid)
        children = parent.children(recursive=True)

        # First try graceful termination
        for child in children:
            try:
                child.terminate()
            except psutil.NoSuchProcess:
                pass

        # Give them a moment to terminate
        _, alive = psutil.wait_procs(children, timeout=3)

        # Force kill any that are still alive
        for child in alive:
            try:
                child.kill()
            except psutil.NoSuchProcess:
                pass

        # Finally terminate the parent
        try:
            parent.terminate()
            parent.wait(3)
        except (psutil.NoSuchProcess, psutil.TimeoutExpired):
            try:
                parent.kill()
            except psutil.NoSuchProcess:
                pass
    except psutil.NoSuchProcess:
        logger.debug(f"Process {pid} already terminated")
