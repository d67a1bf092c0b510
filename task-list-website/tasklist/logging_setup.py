from __future__ import annotations

import logging
import sys
from pathlib import Path


_HANDLER_MARK = "_tasklist_handler"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable while Streamlit reruns the page:
    - tasklist logs pass through
    - streamlit's own chatter only at WARNING+
    - any other third party only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == "tasklist" or name.startswith("tasklist."):
            return True
        if name.startswith("streamlit"):
            return record.levelno >= logging.WARNING
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasklist",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with a filtered console handler and a full debug file.

    Streamlit executes the page script on every interaction, so this is
    called many times per process; handlers installed by an earlier call
    are replaced rather than duplicated.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "tasklist.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        if getattr(h, _HANDLER_MARK, False):
            root.removeHandler(h)
            h.close()

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    setattr(ch, _HANDLER_MARK, True)
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    setattr(fh, _HANDLER_MARK, True)
    root.addHandler(fh)

    logging.captureWarnings(True)
