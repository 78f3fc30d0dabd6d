"""Command-line editor for .netrc login files."""
import sys
from argparse import Namespace
from typing import List, Optional

from dependency_injector.wiring import Provide, inject
from verboselogs import VerboseLogger

from netrc_editor.containers import AppContainer
from netrc_editor.errors import NetrcError
from netrc_editor.helpers import parse_options
from netrc_editor.models import NetrcDocument
from netrc_editor.services.netrc_service import NetrcService

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2


def run_command(args: Namespace, service: NetrcService, logger: VerboseLogger) -> int:
    """Execute one parsed sub-command against the login file."""
    document: NetrcDocument = service.read(args.file)

    match args.command:
        case "get":
            entry = document.get(args.machine)
            if entry is None:
                logger.warning(f"No entry for '{args.machine}' and no default entry.")
                return EXIT_NOT_FOUND
            if entry.is_default and args.machine != entry.machine:
                logger.verbose(f"Using the default entry for '{args.machine}'.")
            login, password = entry
            print(f"{login or ''} {password or ''}")

        case "set":
            if args.prefix is not None:
                document.new_item_prefix = args.prefix
            document.set(args.machine, args.login, args.password)
            service.save(document, make_backup=args.backup, verify=args.verify)

        case "delete":
            if not document.delete(args.machine):
                logger.warning(f"No entry for '{args.machine}'.")
                return EXIT_NOT_FOUND
            service.save(document, make_backup=args.backup)

        case "list":
            for machine in document.machines():
                print(machine)

    return EXIT_OK


@inject
def main(
    args: Namespace,
    service: NetrcService = Provide[AppContainer.netrc_service],
    logger: VerboseLogger = Provide[AppContainer.logger],
) -> int:
    """Program's entrypoint."""
    try:
        return run_command(args, service, logger)

    except ValueError as err:
        logger.error(f"Invalid value: {err}")

    except NetrcError as err:
        logger.error(f"Failed processing login file: {err}")

    except (FileNotFoundError, OSError, PermissionError) as err:
        logger.error(f"Failed accessing login file: {err}")

    return EXIT_ERROR


def run(argv: Optional[List[str]] = None) -> int:
    args = parse_options("View and edit .netrc login files.", argv)

    app_container = AppContainer()
    app_container.verbosity.override(args.verbose)
    app_container.wire(modules=[__name__])
    try:
        return main(args)
    finally:
        app_container.unwire()


if __name__ == "__main__":
    sys.exit(run())
