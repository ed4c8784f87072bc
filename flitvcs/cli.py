"""Command-line entry point."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from flitvcs import commands
from flitvcs.checkout import checkout
from flitvcs.errors import FlitError
from flitvcs.repository import Repository


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser with every subcommand."""
    parser = argparse.ArgumentParser(
        prog="Flit", description="Flit - a tiny Git-like version control experiment"
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("init", help="Initialize a Flit repository")

    hash_object = sub.add_parser("hash-object", help="Hash a Flit object")
    hash_object.add_argument("file")
    hash_object.add_argument("-t", "--type", default="blob", help="Specify the object type")
    hash_object.add_argument(
        "-w", "--write", action="store_true", help="Write object into object database"
    )

    cat_file = sub.add_parser("cat-file", help="Display the contents of a Flit object")
    cat_file.add_argument("hash")

    add = sub.add_parser("add", help="Add files to the staging area")
    add.add_argument("files", nargs="+")

    sub.add_parser("status", help="View status of staging area")

    commit = sub.add_parser("commit", help="Commit files in the staging area")
    commit.add_argument("-m", "--message", required=True, help="Message for commit")

    sub.add_parser("write-tree", help="Write current index to disk")
    sub.add_parser("log", help="View commit log")
    sub.add_parser("display-hashes", help="Display list of hashes")

    branch = sub.add_parser("branch", help="Create/delete a branch")
    branch.add_argument("branch", nargs="?", default="", help="Target branch")
    branch.add_argument("-d", "--delete", action="store_true", help="Delete branch")

    checkout_parser = sub.add_parser("checkout", help="Checkout target branch/hash")
    checkout_parser.add_argument("target", help="Target branch/hash")

    return parser


def _write_bytes(data: bytes) -> None:
    stream = sys.stdout
    buffer = getattr(stream, "buffer", None)
    stream.flush()
    if buffer is None:
        stream.write(data.decode("utf-8", "replace"))
    else:
        buffer.write(data)
        buffer.flush()


def _run(args: argparse.Namespace, repository: Repository) -> None:
    command = args.command
    if command == "hash-object":
        print(commands.hash_object(repository, Path(args.file), args.type, args.write))
    elif command == "cat-file":
        _write_bytes(commands.cat_file(repository, args.hash) + b"\n")
    elif command == "add":
        commands.add(repository, [Path(name) for name in args.files])
    elif command == "status":
        print(commands.format_status(repository), end="")
    elif command == "commit":
        print(commands.commit(repository, args.message).tree_hash)
    elif command == "write-tree":
        print(commands.write_tree(repository).object_id())
    elif command == "log":
        for entry in commands.log(repository):
            print(entry)
    elif command == "display-hashes":
        for object_hash in commands.display_hashes(repository):
            print(object_hash)
    elif command == "branch":
        if not args.branch:
            for name, current in commands.list_branches(repository):
                print(("* " if current else "  ") + name)
        elif args.delete:
            commands.delete_branch(repository, args.branch)
        else:
            commands.create_branch(repository, args.branch)
    elif command == "checkout":
        checkout(repository, args.target)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        print(parser.format_help())
        return 0
    if args.command == "branch" and args.delete and not args.branch:
        parser.error("--delete requires a branch name")

    repository = Repository(Path.cwd())

    if args.command == "init":
        try:
            created = commands.init_repository(repository)
        except (FlitError, OSError):
            print("Failed to initialize Flit repository", file=sys.stderr)
            return 1
        if created:
            print("Initialized empty Flit repository in .flit")
        else:
            print("Flit repository already exists")
        return 0

    try:
        _run(args, repository)
    except (FlitError, OSError):
        print(f"Failed to execute {args.command}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())