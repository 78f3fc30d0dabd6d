"""Helper functions."""
from argparse import ArgumentParser, Namespace
from typing import List, Optional

import coloredlogs
from verboselogs import VerboseLogger

LEVELS: List[str] = ["INFO", "VERBOSE", "DEBUG", "SPAM"]


def parse_options(description: str, argv: Optional[List[str]] = None) -> Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    description : str
        The program's description.
    argv : list[str], optional
        Arguments to parse instead of ``sys.argv[1:]``.

    Returns
    -------
    argparse.Namespace
        Parsed command-line arguments as an object.

    """
    parser = ArgumentParser(description=description)

    parser.add_argument(
        "-f",
        "--file",
        metavar="NETRC",
        type=str,
        default=None,
        help="the login file to edit (default: $NETRC or ~/.netrc)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="increase logs output verbosity (default: info, -v: verbose, "
        "-vv: debug, -vvv: spam)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    get = commands.add_parser("get", help="print the login and password of a machine")
    get.add_argument("machine", type=str, help="the machine name")

    set_ = commands.add_parser("set", help="add or update a machine entry")
    set_.add_argument("machine", type=str, help="the machine name")
    set_.add_argument("login", type=str, help="the login to store")
    set_.add_argument("password", type=str, help="the password to store")
    set_.add_argument(
        "--prefix",
        metavar="TEXT",
        type=str,
        default=None,
        help="text written before the entry if it is new (e.g. a comment)",
    )
    set_.add_argument(
        "--backup",
        action="store_true",
        default=None,
        help="keep a numbered copy of the previous file",
    )
    set_.add_argument(
        "--verify",
        action="store_true",
        default=None,
        help="read the file back after saving and compare",
    )

    delete = commands.add_parser("delete", help="remove a machine entry")
    delete.add_argument("machine", type=str, help="the machine name")
    delete.add_argument(
        "--backup",
        action="store_true",
        default=None,
        help="keep a numbered copy of the previous file",
    )

    commands.add_parser("list", help="print every machine name")

    return parser.parse_args(argv)


def init_logger(
    name: str,
    verbosity_level: int | str = 0,
    formatting: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
) -> VerboseLogger:
    """Initialize the program's logger.

    Parameters
    ----------
    name : str
        The logger's name.
    verbosity_level : int or str
        Verbosity count from the command line, or a level name.
    formatting : str, optional
        The log format.

    Returns
    -------
    verboselogs.VerboseLogger
        The logger.

    """
    if isinstance(verbosity_level, str):
        level = verbosity_level.upper()
    else:
        level = LEVELS[min(max(verbosity_level, 0), len(LEVELS) - 1)]
    logger = VerboseLogger(name)

    coloredlogs.install(
        logger=logger,
        level=level,
        fmt=formatting,
    )

    return logger
