"""
CLI Module

Architectural Intent:
- Command-line interface for pymup
- Entry point for all user interactions
- Delegates to application use cases via composition root
- Only place where typed deployment errors become messages and exit codes
"""

import argparse
import asyncio
import functools
import logging
import os
import sys
import traceback

from pymup.application.dtos.command_dtos import CommandContext
from pymup.domain.errors import DeployError
from pymup.infrastructure.config import (
    DEFAULT_PROJECT_FILE,
    DEFAULT_SETTINGS_FILE,
    load_config,
    load_project,
    load_settings,
)
from pymup.infrastructure.logging import configure_logging

COMMAND_HELP = {
    "setup": "Prepare servers for the app (directories, docker, SSL)",
    "push": "Build the app bundle and upload it to the servers",
    "envconfig": "Send start script and environment to the servers",
    "start": "Start the app and verify the deployment",
    "stop": "Stop the app",
    "deploy": "push, envconfig and start, in that order",
    "logs": "Show the app's docker logs (extra args go to docker logs)",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pymup",
        description="pymup: deploy Meteor apps to your own servers",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output with tracebacks"
    )
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit structured JSON logs"
    )
    parser.add_argument(
        "--config", "-c", default=DEFAULT_PROJECT_FILE, help="Path to mup.json"
    )
    parser.add_argument(
        "--settings", "-s", help="Path to settings.json (defaults next to config)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    for name, help_text in COMMAND_HELP.items():
        sub = subparsers.add_parser(name, help=help_text)
        if name in ("push", "deploy"):
            sub.add_argument(
                "--cached-build",
                action="store_true",
                help="Reuse the previous build instead of building again",
            )
    return parser


def _print_output(host: str, output: str) -> None:
    for line in output.splitlines():
        print(f"[{host}] {line}")


async def async_main():
    parser = build_parser()
    args, extra = parser.parse_known_args()
    if extra and args.command != "logs":
        parser.error(f"unrecognized arguments: {' '.join(extra)}")
    tool_config = load_config()

    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = getattr(logging, tool_config.log_level.upper(), logging.WARNING)
    configure_logging(level=level, json_format=args.json_logs)

    verbose = args.verbose or args.debug

    if not args.command:
        parser.print_help()
        return

    from pymup import composition_root

    container = composition_root.create_container(tool_config)

    try:
        project = load_project(args.config)
        settings_path = args.settings or os.path.join(
            project.base_path, DEFAULT_SETTINGS_FILE
        )
        context = CommandContext(
            raw_config=project.raw,
            base_path=project.base_path,
            settings_loader=functools.partial(load_settings, settings_path),
            verbose=verbose,
            cached_build=getattr(args, "cached_build", False),
        )

        if args.command == "deploy":
            print("[*] Deploying app: push -> envconfig -> start...")
            result = await container.deploy.execute(context)
            if not result.success:
                print(f"[-] Deployment failed at stage '{result.failed_stage}'.")
                result.raise_for_failure()
            print("[+] Deployment Successful.")
            return

        if args.command == "logs":
            docker_args = [a for a in extra if a != "--"]
            await container.logs.execute(context, docker_args, _print_output)
            return

        use_case = getattr(container, args.command)
        print(f"[*] Running {args.command}...")
        await use_case.execute(context)
        print(f"[+] {args.command} Successful.")
    except DeployError as e:
        print(f"[-] error: {e}")
        if verbose:
            traceback.print_exc()
        sys.exit(e.exit_code)


def main():
    asyncio.run(async_main())


if __name__ == "__main__":
    main()
