#!/usr/bin/env python3
"""
confignore command line interface

Queries tool-exclusion and AI-ignore state for paths, lists detected agent
configuration files and watches a workspace for config changes.
"""

import argparse
import asyncio
import json
import sys
import time
from pathlib import Path
from typing import List, Optional

from . import __version__
from .ai.agent_config_detector import AgentConfigDetector
from .ai.resolver import AiIgnoreResolver
from .config import ResolverConfig
from .config_watcher import ConfigWatcher
from .ignore.cache import AiIgnoreCache
from .paths import Workspaces
from .state.resolver import StateResolver
from .utils import configure_logging, get_logger

logger = get_logger(__name__)


class CLIArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors"""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = CLIArgumentParser(
        prog='confignore',
        description='Resolve tool-exclusion and AI-ignore state for workspace paths',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=USAGE_EXAMPLES,
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--workspace', action='append', dest='workspaces', metavar='DIR',
                        help='Workspace root (repeatable, default: current directory)')
    parser.add_argument('--log-level', default=None,
                        help='Log level (TRACE, DEBUG, INFO, WARNING, ERROR)')

    subparsers = parser.add_subparsers(dest='command', parser_class=CLIArgumentParser)

    state_parser = subparsers.add_parser('state',
        help='Show the effective exclusion state of one or more paths')
    state_parser.add_argument('paths', nargs='+', metavar='PATH')

    ai_parser = subparsers.add_parser('ai',
        help='Show whether a path is ignored for AI agents')
    ai_parser.add_argument('path', metavar='PATH')

    agents_parser = subparsers.add_parser('agents',
        help='List agent configuration files found in a workspace')
    agents_parser.add_argument('workspace', metavar='WORKSPACE')

    watch_parser = subparsers.add_parser('watch',
        help='Watch a workspace for AI-ignore config changes')
    watch_parser.add_argument('workspace', metavar='WORKSPACE')

    return parser


USAGE_EXAMPLES = """
Examples:
  confignore state dist/ src/index.ts     # Effective exclusion state
  confignore ai secrets/token.txt         # AI-ignore status
  confignore agents .                     # Detected agent configs
  confignore watch .                      # Report config changes until Ctrl+C

Environment Variables:
  CONFIGNORE_LOG_LEVEL             Log level (default: INFO)
  CONFIGNORE_FILE_CACHE_TTL        File-level cache TTL in seconds
  CONFIGNORE_WORKSPACE_CACHE_TTL   Workspace-level cache TTL in seconds
  CONFIGNORE_WATCH_DEBOUNCE        Watcher debounce in seconds
"""


def _print_json(data) -> None:
    print(json.dumps(data, indent=2))


def _workspaces(args: argparse.Namespace) -> Workspaces:
    roots = args.workspaces or [str(Path.cwd())]
    return Workspaces(roots)


async def run_state(args: argparse.Namespace) -> int:
    resolver = StateResolver(_workspaces(args))
    state = await resolver.resolve_states(args.paths)
    _print_json(state.to_dict())
    return 0


async def run_ai(args: argparse.Namespace, config: ResolverConfig) -> int:
    resolver = AiIgnoreResolver(_workspaces(args), cache=AiIgnoreCache.from_config(config))
    status = await resolver.get_status(args.path)
    _print_json(status.to_dict())
    return 0


async def run_agents(args: argparse.Namespace) -> int:
    result = await AgentConfigDetector().detect_with_summary(Path(args.workspace).resolve())
    _print_json(result.to_dict())
    return 0


def run_watch(args: argparse.Namespace, config: ResolverConfig) -> int:
    root = Path(args.workspace)
    if not root.is_dir():
        print(f"Not a directory: {args.workspace}", file=sys.stderr)
        return 1

    def on_change(path: str):
        print(f"changed: {path}", flush=True)

    watcher = ConfigWatcher(
        root,
        cache=AiIgnoreCache.from_config(config),
        on_config_changed=on_change,
        debounce_seconds=config.debounce_seconds,
    )
    try:
        with watcher:
            print(f"Watching {watcher.workspace.root} (Ctrl+C to stop)", file=sys.stderr)
            while True:
                time.sleep(1)
    except KeyboardInterrupt:
        print("\nStopping watcher...", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(log_level=args.log_level)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = ResolverConfig.from_env()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    if args.command == 'state':
        return asyncio.run(run_state(args))
    if args.command == 'ai':
        return asyncio.run(run_ai(args, config))
    if args.command == 'agents':
        return asyncio.run(run_agents(args))
    if args.command == 'watch':
        return run_watch(args, config)

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
