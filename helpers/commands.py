import subprocess


def run_cmd(cmd: list[str], timeout_s: float | None = 10) -> tuple[int, str, str]:
    """
    Run a child process to completion and return (rc, stdout, stderr).

    Output is decoded text with surrounding whitespace removed.
    timeout_s=None waits for the child however long it takes; otherwise
    subprocess.TimeoutExpired is raised. OSError (missing executable,
    permission denied) is left to the caller.
    """
    p = subprocess.run(cmd, text=True, capture_output=True, timeout=timeout_s)
    return p.returncode, (p.stdout or "").strip(), (p.stderr or "").strip()
