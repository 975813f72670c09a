import locale
import subprocess
from dataclasses import dataclass
from typing import Sequence

from core.errors import CommandTimeout, CommandUnavailable, ParseFailure
from helpers.logger import get_logger

log = get_logger(__name__)

DEFAULT_TIMEOUT_S = 15.0


@dataclass(frozen=True)
class CommandResult:
    """
    Outcome of one native command.

    Either `output` holds the decoded stdout (possibly empty but valid, e.g. a
    listing with no entries) or `failure` names what went wrong. A failed
    command always carries an empty `output`.
    """
    cmd: tuple[str, ...]
    output: str = ""
    rc: int | None = None
    failure: str | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def empty(self) -> bool:
        return not self.output.strip()

    def evidence(self) -> dict:
        # stdout is left out on purpose so reports stay small
        return {
            "cmd": " ".join(self.cmd),
            "rc": self.rc,
            "failure": self.failure,
            "detail": self.detail,
        }


def _decode(raw: bytes) -> str:
    # UTF-8 first, then the console code page (cp1252, cp850 on Windows)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode(locale.getpreferredencoding(False))


class CommandExecutor:
    """
    Runs one external process per call and never raises.

    Holds no state across calls; the same instance is shared by every probe
    of an audit.
    """

    def __init__(self, timeout_s: float = DEFAULT_TIMEOUT_S):
        self.timeout_s = timeout_s

    def execute(self, cmd: Sequence[str], timeout_s: float | None = None) -> CommandResult:
        cmd = tuple(cmd)
        timeout_s = self.timeout_s if timeout_s is None else timeout_s
        try:
            return self._spawn(cmd, timeout_s)
        except (CommandUnavailable, CommandTimeout, ParseFailure) as e:
            result = CommandResult(cmd=cmd, rc=e.rc, failure=type(e).__name__, detail=str(e))
        except Exception as e:  # anything else the OS throws at us
            result = CommandResult(cmd=cmd, failure=CommandUnavailable.__name__,
                                   detail=f"{type(e).__name__}: {e}")
        log.debug("cmd failed: %s (%s: %s)", " ".join(cmd), result.failure, result.detail)
        return result

    def run(self, cmd: Sequence[str], timeout_s: float | None = None) -> str:
        """Text-in/text-out contract: the output, or "" on any failure."""
        return self.execute(cmd, timeout_s).output

    def _spawn(self, cmd: tuple[str, ...], timeout_s: float) -> CommandResult:
        try:
            p = subprocess.run(
                list(cmd),
                capture_output=True,     # bytes, decoded below so we control errors
                timeout=timeout_s,
                stdin=subprocess.DEVNULL,
                creationflags=getattr(subprocess, "CREATE_NO_WINDOW", 0),
            )
        except (FileNotFoundError, PermissionError, NotADirectoryError) as e:
            raise CommandUnavailable(f"{cmd[0]}: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise CommandTimeout(f"{cmd[0]} exceeded {timeout_s}s") from e

        try:
            stdout = _decode(p.stdout)
        except UnicodeDecodeError as e:
            raise ParseFailure(f"{cmd[0]}: undecodable output ({e.reason})", rc=p.returncode) from e

        if p.returncode != 0:
            stderr = p.stderr.decode("utf-8", errors="replace").strip()
            raise CommandUnavailable(f"{cmd[0]} exited {p.returncode}: {stderr[:200]}", rc=p.returncode)

        log.debug("cmd ok: %s (rc=0, %d chars)", " ".join(cmd), len(stdout))
        return CommandResult(cmd=cmd, output=stdout.strip(), rc=p.returncode)
