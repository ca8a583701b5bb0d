# Command execution (the only I/O primitive the players use)
#
# What it does in production:
# - run dbus-send / playerctl / pgrep through bash on Linux
# - run osascript on macOS
# - run tasklist / powershell on Windows
#
# Every backend goes through execute(), so tests only ever patch this module.

import logging
import os
import signal
import subprocess
from typing import Optional, Sequence, Tuple

log = logging.getLogger(__name__)

_POSIX = os.name == "posix"
# how long to wait for pipes to close after a kill
_REAP_TIMEOUT = 1.0

SHELL = ("/bin/bash", "-c")
OSASCRIPT = ("osascript", "-e")
POWERSHELL = ("powershell", "-NoProfile", "-NonInteractive", "-Command")

# None means "wait forever", which is how the players behave unless
# command_timeout is set in the config.
_default_timeout: Optional[float] = None


def set_default_timeout(timeout: Optional[float]) -> None:
    global _default_timeout
    _default_timeout = timeout


def run_cmd(cmd: Sequence[str], timeout: Optional[float] = None) -> Tuple[int, str, str]:
    """
    Run a command, capture stdout/stderr, return (rc, out, err).
    """
    proc = subprocess.Popen(
        list(cmd),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        # window titles and process lines are not always valid UTF-8
        errors="replace",
        # own process group, so a timeout can kill the whole pipeline
        start_new_session=_POSIX,
    )
    try:
        out, err = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill(proc)
        try:
            proc.communicate(timeout=_REAP_TIMEOUT)
        except subprocess.TimeoutExpired:
            log.warning("Process %s still holds its pipes after kill", proc.pid)
        raise
    return proc.returncode, (out or "").strip(), (err or "").strip()


def _kill(proc: subprocess.Popen) -> None:
    if _POSIX:
        try:
            os.killpg(proc.pid, signal.SIGKILL)
            return
        except OSError as e:
            log.debug("killpg(%s) failed: %s", proc.pid, e)
    proc.kill()


def execute(command_line: str, interpreter: Sequence[str] = SHELL,
            timeout: Optional[float] = None) -> str:
    """
    Run *command_line* through *interpreter* and return its trimmed stdout.

    Never raises: spawn errors and timeouts come back as "".
    """
    if timeout is None:
        timeout = _default_timeout
    argv = list(interpreter) + [command_line]
    try:
        rc, out, err = run_cmd(argv, timeout=timeout)
    except subprocess.TimeoutExpired:
        log.warning("Command timed out after %ss: %s", timeout, command_line)
        return ""
    except (OSError, subprocess.SubprocessError, ValueError) as e:
        # ValueError covers UnicodeError from decoding the output
        log.warning("Command failed to run (%s): %s", e, command_line)
        return ""

    if err:
        log.debug("Command wrote to stderr (rc=%s): %s", rc, err)
    return out


def run_applescript(script: str) -> str:
    return execute(script, interpreter=OSASCRIPT)


def run_powershell(script: str) -> str:
    return execute(script, interpreter=POWERSHELL)
