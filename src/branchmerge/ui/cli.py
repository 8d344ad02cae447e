from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from branchmerge.app import get_branch, list_branches, merge_branches, seed_demo_branches
from branchmerge.config import configure_logging
from branchmerge.domain.consolidation import ConsolidationError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Consolidate duplicate merchant branches")
    subparsers = parser.add_subparsers(dest="command", required=True)

    merge = subparsers.add_parser("merge", help="Merge duplicate branches into a canonical one")
    merge.add_argument(
        "--canonical",
        type=str,
        required=True,
        help="Id of the branch that survives the merge",
    )
    merge.add_argument(
        "--duplicate",
        dest="duplicates",
        type=str,
        action="append",
        required=True,
        help="Id of a branch to absorb (repeat for several)",
    )
    merge.add_argument(
        "--by",
        type=str,
        help="Operator name recorded in the merge audit trail",
    )
    merge.add_argument(
        "--timeout",
        type=float,
        help="Give up (and roll back) after this many seconds (defaults to config)",
    )

    subparsers.add_parser("list", help="List all stored branches")

    show = subparsers.add_parser("show", help="Show a single branch")
    show.add_argument("branch_id", type=str, help="Id of the branch to show")

    subparsers.add_parser("seed-demo", help="Insert demo branches that are missing")

    return parser.parse_args(list(argv))


def _render(payload: object) -> str:
    return json.dumps(payload, indent=2, sort_keys=True)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    if parsed_args.command == "merge" and parsed_args.timeout is not None:
        if parsed_args.timeout <= 0:
            log.error("Timeout must be positive")
            sys.exit(2)

    try:
        if parsed_args.command == "merge":
            branch = merge_branches(
                parsed_args.canonical,
                parsed_args.duplicates,
                requested_by=parsed_args.by,
                timeout_seconds=parsed_args.timeout,
            )
            log.info("Canonical branch:\n%s", _render(branch.as_dict()))
        elif parsed_args.command == "list":
            branches = list_branches()
            log.info("%d branches:\n%s", len(branches), _render([b.as_dict() for b in branches]))
        elif parsed_args.command == "show":
            branch = get_branch(parsed_args.branch_id)
            if branch is None:
                log.info("Branch %s not found", parsed_args.branch_id)
            else:
                log.info("Branch:\n%s", _render(branch.as_dict()))
        elif parsed_args.command == "seed-demo":
            inserted = seed_demo_branches()
            log.info("Inserted %d demo branches", inserted)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ConsolidationError as exc:
        if exc.client_error:
            log.error("Merge rejected: %s", exc)  # noqa: TRY400
            sys.exit(2)
        log.exception("Merge failed (safe to retry)")
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
