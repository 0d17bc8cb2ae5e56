"""Run perfect-validator as a module.

``python -m perfect_validator cli <command> ...`` runs the command line
interface; see ``perfect_validator.cli`` for the available commands.
"""

import asyncio
import sys
from typing import List, Optional

from . import cli

TOOLS = {"cli": cli.main}


def main(argv: Optional[List[str]] = None) -> int:
    """Dispatch to the named tool and return its exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args or args[0] not in TOOLS:
        if args:
            print(f"Unknown tool: {args[0]}", file=sys.stderr)
        print(f"Usage: python -m perfect_validator {{{','.join(TOOLS)}}} [args...]", file=sys.stderr)
        return 1
    return asyncio.run(TOOLS[args[0]](args[1:]))


if __name__ == "__main__":
    sys.exit(main())
