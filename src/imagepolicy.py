"""imagepolicy - resolve the latest image tag allowed by a tag policy.

Reads a policy file and a tag scan, evaluates the policy against the status
of the previous run and writes the new status.
"""

import json
import logging
import os
import sys

from args import parse_args
from cli_config import build_digest_lookup, setup_logging
from common.logging_utils import extra_context, is_debug_enabled
from constants import ExitCodes
from policy.config import load_policy_spec
from policy.errors import DigestFetchError, InvalidPolicyError
from registry.tag_source import TagSourceError, load_tags
from resolution.evaluator import PolicyEvaluator, PolicyStatus

logger = logging.getLogger(__name__)


def load_status(path):
    """Load the previous status; a missing file means no previous evaluation.

    Raises:
        ValueError: The file exists but is not a JSON object.
    """
    if not path or not os.path.isfile(path):
        return PolicyStatus()
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as e:
            raise ValueError(f"status file '{path}' is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"status file '{path}' must contain a JSON object")
    return PolicyStatus.from_dict(data)


def write_status(status, path=None):
    """Write the status as JSON to ``path`` or stdout."""
    payload = json.dumps(status.to_dict(), indent=2) + "\n"
    if not path:
        sys.stdout.write(payload)
        return
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(payload)
    logging.info("Status has been written to: %s", path)


def exit_code_for(status):
    """Map an evaluation status to the exit code of the program."""
    if status.ready:
        return ExitCodes.SUCCESS
    if status.stalled:
        return ExitCodes.INVALID_POLICY
    if isinstance(status.error, DigestFetchError):
        return ExitCodes.DIGEST_ERROR
    return ExitCodes.RETRY


def run(args):
    """Evaluate the policy described by ``args``; returns an ExitCodes member."""
    try:
        spec = load_policy_spec(args.CONFIG)
    except InvalidPolicyError as e:
        logging.error("Invalid policy configuration: %s", e)
        return ExitCodes.INVALID_POLICY

    try:
        tags = load_tags(args.TAGS)
        previous = load_status(args.STATUS)
    except (TagSourceError, ValueError, OSError) as e:
        logging.error("%s, aborting", e)
        return ExitCodes.FILE_ERROR

    if is_debug_enabled(logger):
        logger.debug(
            "Evaluating policy",
            extra=extra_context(
                event="function_entry",
                component="cli",
                action="run",
                count=len(tags),
                target=spec.image,
            )
        )

    evaluator = PolicyEvaluator(spec, digest_lookup=build_digest_lookup(args))
    status = evaluator.evaluate(tags, previous)

    try:
        write_status(status, args.OUTPUT or args.STATUS)
    except OSError as e:
        logging.error("Status couldn't be written to disk: %s", e)
        return ExitCodes.FILE_ERROR

    return exit_code_for(status)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    setup_logging(args)
    sys.exit(run(args).value)


if __name__ == "__main__":
    main()
