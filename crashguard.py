# crashguard.py
# ------------------------------------------------------------
#  Crash logger - import this FIRST in any entry script
# ------------------------------------------------------------
import atexit
import datetime
import faulthandler
import os
import signal
import sys
import threading
import traceback

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
# Same location rule as config.paths, resolved here so config errors are caught too
LOG_DIR = os.environ.get("SB_LOG_DIR", BASE_DIR)
CRASH_LOG_PATH = os.path.join(LOG_DIR, "crash.txt")

try:
    _crash_fh = open(CRASH_LOG_PATH, "a", encoding="utf-8")
except OSError:
    _crash_fh = None


def _write_crash(msg: str):
    """Append a timestamped line to the crash log and stderr."""
    timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    full_msg = f"[{timestamp}] {msg}\n"

    try:
        if _crash_fh:
            _crash_fh.write(full_msg)
            _crash_fh.flush()
            os.fsync(_crash_fh.fileno())
        sys.stderr.write(full_msg)
        sys.stderr.flush()
    except (OSError, ValueError):
        # log file closed or disk gone; nothing left to report to
        pass


def _close_log():
    if _crash_fh:
        try:
            _crash_fh.close()
        except OSError:
            pass


atexit.register(_close_log)


def _report_to_showlog(message: str):
    logger = sys.modules.get("showlog")
    if logger is not None:
        logger.error(message)


# --- low-level / segfaults ---
try:
    faulthandler.enable(_crash_fh or sys.stderr, all_threads=True)
except (RuntimeError, ValueError) as e:
    _write_crash(f"[CRASHGUARD] Failed to enable faulthandler: {e}")


# --- global exception hook ---
def _global_excepthook(exc_type, exc_value, exc_tb):
    trace = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    _write_crash(f"\n=== Unhandled Exception ===\n{trace}")
    _report_to_showlog(f"[CRASH] {exc_type.__name__}: {exc_value}")


sys.excepthook = _global_excepthook


# --- thread hook (audio callback, log writer) ---
def _thread_excepthook(args):
    tb = "".join(traceback.format_exception(args.exc_type, args.exc_value, args.exc_traceback))
    name = args.thread.name if args.thread else "?"
    _write_crash(f"\n=== THREAD CRASH in {name} ===\n{tb}")
    _report_to_showlog(f"[THREAD CRASH] {name}: {args.exc_value}")


threading.excepthook = _thread_excepthook


# --- optional manual dump (POSIX only) ---
if hasattr(signal, "SIGUSR1"):
    try:
        faulthandler.register(signal.SIGUSR1, file=_crash_fh or sys.stderr, all_threads=True)
    except (RuntimeError, ValueError) as e:
        _write_crash(f"[CRASHGUARD] Could not register SIGUSR1: {e}")


_write_crash("=" * 60)
_write_crash(f"[CRASHGUARD] Python {sys.version.split()[0]}, crash log: {CRASH_LOG_PATH}")


# --- public API for explicit checkpoints ---
def checkpoint(msg: str):
    """Manual checkpoint for tracking initialization progress."""
    _write_crash(f"[CHECKPOINT] {msg}")


def emergency_log(msg: str):
    """Emergency logging for critical failures."""
    _write_crash(f"[EMERGENCY] {msg}")


__all__ = ["checkpoint", "emergency_log"]
