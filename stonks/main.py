"""Main module entrypoint for local runtime execution.

With command arguments, one ledger command runs and the process exits with
its status. Without arguments, an interactive command loop starts. `serve`
launches the read-only API.
"""

from __future__ import annotations

import argparse
from typing import Sequence

import uvicorn

from stonks.bootstrap import bootstrap_create_application, bootstrap_create_context, bootstrap_create_dispatcher
from stonks.commands import (
    COMMAND_USAGE,
    command_enable_line_history,
    command_source_arguments,
    command_source_interactive,
)
from stonks.config import SettingsLoadError, config_configure_logging, config_load_settings
from stonks.domain import StoreConnectionError


def main(argv: Sequence[str] | None = None) -> None:
    """Run the selected runtime mode with validated startup configuration.

    Args:
        argv: Process arguments without the program name; defaults to `sys.argv[1:]`.

    Raises:
        SystemExit: Raised with a non-zero status when startup or the command fails.
    """

    argument_parser = argparse.ArgumentParser(
        prog="stonks",
        description="Personal stock ledger. Commands: " + "; ".join(COMMAND_USAGE.values()) + "; serve",
    )
    argument_parser.add_argument(
        "--database-url",
        dest="database_url",
        type=str,
        help="Override DATABASE_URL for this invocation",
    )
    argument_parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Ledger command and its arguments; omit to start the interactive loop",
    )
    parsed_arguments = argument_parser.parse_args(argv)

    try:
        settings = config_load_settings(database_url=parsed_arguments.database_url)
    except SettingsLoadError as error:
        print(error)
        raise SystemExit(1) from error
    config_configure_logging(settings.log_level)

    try:
        context = bootstrap_create_context(settings)
    except StoreConnectionError as error:
        print(f"Could not connect to the transaction store: {error}")
        raise SystemExit(1) from error

    if parsed_arguments.command == ["serve"]:
        uvicorn.run(
            bootstrap_create_application(context),
            host=settings.application_host,
            port=settings.application_port,
        )
        return

    dispatcher = bootstrap_create_dispatcher(context)
    if parsed_arguments.command:
        status = dispatcher.command_run_source(command_source_arguments(parsed_arguments.command))
        if status != 0:
            raise SystemExit(status)
        return

    command_enable_line_history()
    dispatcher.command_run_source(command_source_interactive(prompt=settings.repl_prompt))


if __name__ == "__main__":
    main()
