# flitvcs

A tiny Git-like version control system. File contents, directory listings and
commits are stored as zlib-compressed objects named by the SHA-256 hash of
their contents, inside a `.flit` directory in your working tree. A plain-text
index records staged files, and branches are small files under
`.flit/refs/heads`.

## Installation

```
pip install .
```

This installs the `flit` command.

## Usage

Run every command from the root of your working tree; paths are taken
relative to the current directory.

```
flit init                     # create .flit with HEAD pointing at refs/heads/main
flit hash-object notes.txt    # print a file's blob hash
flit hash-object -w notes.txt # ...and store the blob
flit cat-file <hash>          # print the payload of a stored object
flit add notes.txt src/       # store files (directories recursively) and stage them
flit status                   # list untracked files
flit write-tree               # store the index as tree objects, print the root tree hash
flit commit -m "first commit" # record a commit on the current branch, print its tree hash
flit log                      # walk the commit history from HEAD
flit display-hashes           # list every stored object hash, sorted
flit branch                   # list branches, marking the current one with *
flit branch feature           # create a branch at the current commit
flit branch -d feature        # delete a branch (not the current one)
flit checkout feature         # switch to a branch or a commit hash
```

`hash-object` accepts `-t/--type`, but only `blob` is supported.

`checkout` refuses, changing nothing, when a tracked file differs from what is
staged or when an untracked file would be overwritten. Otherwise it removes
tracked files absent from the target (pruning directories left empty), writes
the target's files, rewrites the index and updates HEAD. Checking out a commit
hash that is not a branch name stores that hash in HEAD.

On failure a command prints `Failed to execute <command>` to standard error
and exits with status 1.

### Ignoring files

Paths listed in a `.flitignore` file at the root of the working tree are left
out of `status`. Each line may name a file name, a full relative path, or a
directory (everything below it is ignored); blank lines and lines starting
with `#` are skipped. There are no wildcards. The `.flit` and `.git`
directories are always skipped.

## Library use

The same operations are available from Python:

```python
from pathlib import Path

from flitvcs.repository import Repository
from flitvcs.commands import init_repository, add, commit, log
from flitvcs.checkout import checkout

repo = Repository(Path.cwd())
init_repository(repo)            # False if .flit already existed
add(repo, [Path("notes.txt")])
commit(repo, "first commit")     # returns the CommitObject
for entry in log(repo):          # LogEntry items, newest first
    print(entry)
```

`flitvcs.commands` also provides `hash_object`, `cat_file`, `untracked_files`,
`format_status`, `write_tree`, `display_hashes`, `list_branches`,
`create_branch` and `delete_branch`. The stores are reachable as
`Repository.objects` (`ObjectStore`), `Repository.refs` (`RefStore`),
`Repository.index` (`Index`) and `Repository.ignore` (`Ignore`); the object
kinds `Blob`, `Tree` and `CommitObject` live in `flitvcs.objects`.

Failures raise `flitvcs.errors.FlitError`. Objects that cannot be decoded
raise `flitvcs.errors.MalformedObjectError`, a subclass of it.

## What it does not do

- `status` always reports `On branch main` and its staged and unstaged
  sections are always empty; only untracked files are listed.
- There is no diff, merge, reset, or command to unstage or remove files.
- There are no remotes: nothing is fetched, pushed or cloned.

## Development

```
pip install -e ".[test]"
pytest
```