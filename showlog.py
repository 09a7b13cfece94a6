# showlog.py: log sink with timestamps, levels, auto-tag, background file writer, optional log bar
import datetime
import os
import queue
import sys
import threading
import time
import traceback
from typing import Optional

import pygame

import config as cfg
from helper import to_rgb

# ---------- state ----------
font = None
screen_ref = None
log_text = ""     # last text shown on the log bar
lastmsg = ""      # last full canonical line written to file ([LEVEL module:line] ...)

# CPU cache to avoid blocking in draw_bar()
_last_cpu = 0.0
_last_cpu_t = 0.0

LEVELS = ("ERROR", "WARN", "INFO", "DEBUG", "VERBOSE")


def _allow_level(level_name: str) -> bool:
    """Filter by numeric LOG_LEVEL (0=error, 1=warn, 2=info); debug/verbose use flags."""
    lvl = (level_name or "INFO").upper()
    level = int(getattr(cfg, "LOG_LEVEL", 2))
    if lvl == "ERROR":
        return level >= 0
    elif lvl == "WARN":
        return level >= 1
    elif lvl == "INFO":
        return level >= 2
    elif lvl == "DEBUG":
        return bool(getattr(cfg, "DEBUG_LOG", False))
    elif lvl == "VERBOSE":
        return bool(getattr(cfg, "VERBOSE_LOG", False))
    # unknown/custom tags count as INFO
    return level >= 2


# ---------------------------------------------------------------------
# Background file writer for non-blocking logging
# ---------------------------------------------------------------------
_log_queue = queue.Queue(maxsize=int(getattr(cfg, "LOG_QUEUE_SIZE", 512)))
_log_writer_started = False
_writer_lock = threading.Lock()


def _log_writer_loop():
    """Drain the log queue and append to LOG_FILE."""
    while True:
        msg = _log_queue.get()
        if msg is None:
            _log_queue.task_done()
            break
        try:
            _direct_write_file(msg)
        except OSError as e:
            print(f"[showlog] writer failed: {e}", file=sys.stderr)
        finally:
            _log_queue.task_done()


def _start_log_writer():
    global _log_writer_started
    with _writer_lock:
        if _log_writer_started:
            return
        t = threading.Thread(target=_log_writer_loop, name="showlog-writer", daemon=True)
        t.start()
        _log_writer_started = True


def _timestamp() -> str:
    return datetime.datetime.now().strftime("%H:%M:%S")


def _direct_write_file(msg: str):
    path = getattr(cfg, "LOG_FILE", None)
    if not path:
        return
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"[{_timestamp()}] {msg}\n")


def _write_file(msg: str):
    """Enqueue log lines for background writing."""
    if not getattr(cfg, "LOG_TO_FILE", True):
        return
    _start_log_writer()
    try:
        _log_queue.put_nowait(msg)
    except queue.Full:
        # Drop oldest to keep throughput steady
        try:
            _log_queue.get_nowait()
            _log_queue.task_done()
            _log_queue.put_nowait(msg)
        except (queue.Empty, queue.Full):
            pass


def flush(timeout: float = 1.0):
    """Block until queued lines are written (or timeout elapses)."""
    deadline = time.time() + timeout
    while _log_queue.unfinished_tasks and time.time() < deadline:
        time.sleep(0.01)


# ---------- caller tagging ----------
def _caller_info():
    """Return (module, line_no) of the first frame outside showlog.py."""
    frame = sys._getframe(1)
    while frame:
        filename = frame.f_code.co_filename
        if not filename.endswith("showlog.py"):
            short = os.path.splitext(os.path.basename(filename))[0] or "main"
            return short, frame.f_lineno
        frame = frame.f_back
    return "main", 0


def _split_prefix(s: str):
    if s.startswith("[") and "]" in s:
        head, tail = s.split("]", 1)
        return head[1:].strip(), tail.strip()
    return None, s


def log_process(msg: str):
    """
    Process and record a log message (write to file, update log bar text).
    Does NOT draw; rendering is handled by draw_bar().
    """
    global log_text, lastmsg

    if getattr(cfg, "LOG_OFF", False):
        return
    if msg is None:
        return
    raw = str(msg).strip()
    if not raw:
        return

    tag, tail = _split_prefix(raw)
    level_name = "INFO"
    if tag and tag.split(" ", 1)[0].upper() in LEVELS:
        level_name = tag.split(" ", 1)[0].upper()
    else:
        # custom leading tag like [REGISTRY] stays part of the text
        tail = raw

    if not _allow_level(level_name):
        return

    module_name, module_line = _caller_info()
    file_line = f"[{level_name} {module_name}:{module_line}] {tail}"

    # --- File write (avoid duplicates) ---
    if file_line != lastmsg:
        _write_file(file_line)
        lastmsg = file_line

    log_text = tail


def last():
    return log_text


def init(screen, font_name="Courier", font_size=14):
    """Attach the on-screen log bar to a pygame surface."""
    global font, screen_ref
    if not pygame.font.get_init():
        pygame.font.init()
    font = pygame.font.SysFont(font_name, font_size)
    screen_ref = screen


def draw_bar(screen=None, fps_value=None):
    """
    Draw the bottom log bar with current log_text, clock, CPU meter, and optional FPS.
    Called once per frame by the render pipeline when SHOW_LOG_BAR is on.
    """
    global screen_ref, _last_cpu, _last_cpu_t

    if screen is not None:
        screen_ref = screen
    else:
        screen = screen_ref
    if not screen or not font:
        return

    log_bar_h = int(getattr(cfg, "LOG_BAR_HEIGHT", 20))
    rect = pygame.Rect(0, screen.get_height() - log_bar_h, screen.get_width(), log_bar_h)
    pygame.draw.rect(screen, (10, 10, 10), rect)

    # --- Left: log text ---
    text_color = to_rgb(getattr(cfg, "LOG_TEXT_COLOR", "#FFFFFF"))
    text_surface = font.render(log_text, True, text_color)
    screen.blit(text_surface, (10, rect.top + 2))

    # --- Right: clock + CPU (+ FPS) ---
    overlay_text = time.strftime("%H:%M")
    cpu = 0
    if getattr(cfg, "CPU_ON", True):
        now = time.time()
        if now - _last_cpu_t > 0.5:
            import psutil
            _last_cpu = psutil.cpu_percent(interval=None)
            _last_cpu_t = now
        cpu = int(round(_last_cpu))
        overlay_text += f" | CPU: {cpu:03d}%"
    if fps_value is not None:
        overlay_text += f" | FPS: {int(round(fps_value)):03d}"

    # --- Color based on CPU load ---
    if cpu < 50:
        cpu_col = (180, 180, 180)
    elif cpu < 85:
        cpu_col = (255, 180, 0)
    else:
        cpu_col = (255, 60, 60)

    overlay_surf = font.render(overlay_text, True, cpu_col)
    overlay_rect = overlay_surf.get_rect()
    overlay_rect.bottom = rect.bottom - 2
    overlay_rect.right = rect.right - 10
    screen.blit(overlay_surf, overlay_rect)


# ---------- public log wrappers ----------
def log(message):
    """Unified public entry point, always INFO."""
    log_process(f"[INFO] {message}")


def _format_exc_str(exc: Optional[BaseException] = None) -> str:
    """
    Return a full traceback string for the current exception context or a given exception.
    Safe to call even if no exception is active (returns empty string).
    """
    if exc is not None:
        return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    exc_type, exc_val, exc_tb = sys.exc_info()
    if exc_val is None:
        return ""
    return "".join(traceback.format_exception(exc_type, exc_val, exc_tb))


def error(msg: Optional[str] = None, exc: Optional[BaseException] = None):
    """
    Log an ERROR. If called inside an exception handler (or with exc=),
    append the full traceback to the message.
    """
    tb = _format_exc_str(exc)
    full = msg if msg else ""
    if tb:
        full = (full + ("\n" if full else "") + tb).rstrip()
    log_process(f"[ERROR] {full}")


def debug(message):
    """Extra-detailed debug messages (file only)."""
    log_process(f"[DEBUG] {message}")


def info(message):
    log_process(f"[INFO] {message}")


def warn(message):
    log_process(f"[WARN] {message}")


def verbose(message):
    if not getattr(cfg, "VERBOSE_LOG", False):
        return
    log_process(f"[VERBOSE] {message}")


# Replay anything config queued before we existed
cfg._flush_pending_logs()
