"""mdr CLI entry point.

Allows running via `python -m mdr` and provides the `mdr` console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Optional

from .constants import ViewerConstants
from .version import get_version_string

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """Command line could not be understood."""


@dataclass
class CliArgs:
    enable_beeline: bool = True
    inputs: list[str] = field(default_factory=list)
    show_version: bool = False
    keytest: bool = False


def parse_args(argv: list[str]) -> CliArgs:
    """Parse arguments (without the program name).

    Raises:
        UsageError: no inputs were given, or an unknown option was used.
    """
    args = CliArgs()
    only_paths = False
    for arg in argv:
        if only_paths:
            args.inputs.append(arg)
        elif arg == "--":
            only_paths = True
        elif arg in ("--version", "-V"):
            args.show_version = True
        elif arg in ("--keytest", "--keyboard-test"):
            args.keytest = True
        elif arg == "--no-beeline":
            args.enable_beeline = False
        elif arg.startswith("-") and arg != "-":
            raise UsageError(f"Unknown option: {arg}\n{ViewerConstants.USAGE}")
        else:
            args.inputs.append(arg)
    if not args.inputs and not (args.show_version or args.keytest):
        raise UsageError(ViewerConstants.USAGE)
    return args


def configure_logging(env: Optional[dict] = None) -> None:
    """Send debug logging to the file named by MDR_LOG; otherwise stay quiet.

    The viewer owns the terminal, so nothing is ever logged to it.
    """
    env = os.environ if env is None else env
    target = env.get("MDR_LOG")
    if target:
        logging.basicConfig(
            filename=target,
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    else:
        logging.getLogger("mdr").addHandler(logging.NullHandler())


def _escape_bytes(s: str) -> str:
    """Return a printable representation of a raw key string."""
    return s.encode('unicode_escape').decode('ascii')


def run_keyboard_test() -> None:
    """Print parsed key and mouse events until ESC is pressed."""
    from .keyboard import KeyboardHandler, KeyEvent, KeyType
    from .terminal import TerminalInterface

    print("Keyboard test mode: press keys or use the mouse to see parsed events.")
    print("Quit with ESC.")

    term = TerminalInterface()
    term.setup()
    kb = KeyboardHandler(term)
    try:
        while True:
            ev = kb.get_key_event(timeout=None)
            if ev is None:
                continue
            if not isinstance(ev, KeyEvent):
                print(f"mouse kind={ev.kind.value} x={ev.x} y={ev.y} button={ev.button}\r")
                continue
            if ev.key_type == KeyType.SPECIAL and ev.value == 'escape':
                print("Exiting keyboard test.\r")
                break
            parts = [f"type={ev.key_type.value}", f"value={ev.value!r}", f"raw='{_escape_bytes(ev.raw)}'"]
            flags = [name for name, on in (('alt', ev.is_alt), ('ctrl', ev.is_ctrl),
                                           ('shift', ev.is_shift), ('seq', ev.is_sequence)) if on]
            if flags:
                parts.append(f"flags={'+'.join(flags)}")
            print(' '.join(parts) + '\r')
    finally:
        term.cleanup()


def main(argv: Optional[list[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    try:
        args = parse_args(argv)
    except UsageError as e:
        print(e, file=sys.stderr)
        return 2

    if args.show_version:
        print(get_version_string())
        return 0

    configure_logging()
    if args.keytest:
        run_keyboard_test()
        return 0

    from .discovery import DiscoveryError, discover_markdown_paths
    try:
        paths = discover_markdown_paths(args.inputs)
    except (DiscoveryError, OSError) as e:
        print(f"mdr: {e}", file=sys.stderr)
        return 1
    if not paths:
        print("mdr: no markdown files found", file=sys.stderr)
        return 1

    # Lazy import to avoid importing UI deps for --version and usage errors
    from .viewer import Viewer
    try:
        viewer = Viewer(paths, beeline=args.enable_beeline)
    except OSError as e:
        print(f"mdr: cannot open {paths[0]}: {e}", file=sys.stderr)
        return 1
    logger.debug("Starting with %d document(s)", len(paths))
    viewer.run()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
