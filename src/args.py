"""Argument parsing functionality for imagepolicy."""

import argparse


def build_parser():
    """Builds the argument parser of the program."""
    parser = argparse.ArgumentParser(
        prog="imagepolicy",
        description=(
            "imagepolicy - Resolve the latest image tag allowed by a tag policy"
        ),
        add_help=True,
    )

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to the image policy file (YAML or JSON)",
                        action="store",
                        type=str,
                        required=True)
    parser.add_argument("-t", "--tags",
                        dest="TAGS",
                        help="Path to the JSON tag scan of the image repository",
                        action="store",
                        type=str,
                        required=True)
    parser.add_argument("-s", "--status",
                        dest="STATUS",
                        help="Path to the status of the previous evaluation (JSON); "
                             "updated in place unless --output is given",
                        action="store",
                        type=str)
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to write the new status to (default: stdout)",
                        action="store",
                        type=str)

    digest_group = parser.add_mutually_exclusive_group()
    digest_group.add_argument("--digest",
                              dest="DIGEST",
                              help="Digest of the resolved image, used when the reflection policy needs one",
                              action="store",
                              type=str)
    digest_group.add_argument("--digest-command",
                              dest="DIGEST_COMMAND",
                              help="Shell command printing the digest of the resolved image; "
                                   "{image}, {tag} and {ref} are substituted",
                              action="store",
                              type=str)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
