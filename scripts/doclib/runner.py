"""
External tool invocation.

Every stage shells out through a CommandRunner so tests can swap in a
fake that records commands instead of running pandoc and friends.
"""

import shutil
import subprocess


class CommandResult:
    def __init__(self, cmd, returncode, stdout="", stderr="", label="Command"):
        self.cmd = [str(c) for c in cmd]
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        self.label = label

    @property
    def ok(self):
        return self.returncode == 0

    def __repr__(self):
        return f"CommandResult({self.cmd[0]!r}, returncode={self.returncode})"


class CommandRunner:
    def __init__(self, verbose=False):
        self.verbose = verbose

    def run(self, cmd, cwd=None, label="Command"):
        """
        Run a command to completion and capture its output.

        A non-zero exit is reported and returned, never raised.
        """
        cmd = [str(c) for c in cmd]
        if self.verbose:
            print(f"    $ {' '.join(cmd)}")
        try:
            proc = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError:
            print(f"  ✗ {cmd[0]} not found")
            return CommandResult(cmd, 127, stderr=f"{cmd[0]}: command not found", label=label)

        result = CommandResult(cmd, proc.returncode, proc.stdout, proc.stderr, label)
        if self.verbose and result.stdout.strip():
            for line in result.stdout.strip().splitlines():
                print(f"    {line}")
        if not result.ok:
            print(f"  ✗ {label} failed (exit {result.returncode})")
            if result.stderr:
                for line in result.stderr.strip().splitlines()[:20]:
                    print(f"    {line}")
        return result

    def available(self, name):
        """Check that a required external tool is on PATH."""
        return shutil.which(name) is not None
