import pytest

from flitvcs import commands
from flitvcs.errors import FlitError
from flitvcs.objects import Blob, CommitObject, Tree, TreeEntryType
from flitvcs.repository import Repository


@pytest.fixture
def repo(tmp_path):
    repository = Repository(tmp_path)
    repository.init()
    return repository


def _write(repo, relative, content):
    path = repo.worktree / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def test_init_repository_reports_creation_then_existing(tmp_path):
    repository = Repository(tmp_path)
    assert commands.init_repository(repository) is True
    assert commands.init_repository(repository) is False


def test_hash_object_without_write_does_not_store(repo):
    _write(repo, "a.txt", b"hello")
    object_hash = commands.hash_object(repo, "a.txt", "blob", False)
    assert object_hash == Blob(b"hello").object_id()
    assert commands.display_hashes(repo) == []


def test_hash_object_with_write_stores(repo):
    _write(repo, "a.txt", b"hello")
    object_hash = commands.hash_object(repo, "a.txt", "blob", True)
    assert commands.display_hashes(repo) == [object_hash]
    assert commands.cat_file(repo, object_hash) == b"hello"


def test_hash_object_rejects_unknown_type(repo):
    _write(repo, "a.txt", b"hello")
    with pytest.raises(FlitError):
        commands.hash_object(repo, "a.txt", "tree", False)


def test_hash_object_missing_file(repo):
    with pytest.raises(FlitError):
        commands.hash_object(repo, "missing.txt", "blob", False)


def test_cat_file_unknown_hash(repo):
    with pytest.raises(FlitError):
        commands.cat_file(repo, "ab" * 32)


def test_add_stages_file(repo):
    _write(repo, "a.txt", b"content")
    commands.add(repo, ["a.txt"])
    entries = repo.index.load()
    assert [(e.path, e.object_hash) for e in entries] == [
        ("a.txt", Blob(b"content").object_id())
    ]
    assert commands.cat_file(repo, entries[0].object_hash) == b"content"


def test_add_directory_recurses(repo):
    _write(repo, "dir/one.txt", b"1")
    _write(repo, "dir/sub/two.txt", b"2")
    commands.add(repo, ["dir"])
    paths = sorted(e.path for e in repo.index.load())
    assert paths == ["dir/one.txt", "dir/sub/two.txt"]


def test_add_replaces_hash_on_restage(repo):
    _write(repo, "a.txt", b"old")
    commands.add(repo, ["a.txt"])
    _write(repo, "a.txt", b"new")
    commands.add(repo, ["a.txt"])
    entries = repo.index.load()
    assert len(entries) == 1
    assert entries[0].object_hash == Blob(b"new").object_id()


def test_add_missing_path_raises(repo):
    with pytest.raises(FlitError):
        commands.add(repo, ["nope.txt"])


def test_untracked_files_excludes_tracked_and_ignored(tmp_path):
    (tmp_path / ".flitignore").write_text("build\nsecret.log\n")
    repository = Repository(tmp_path)
    repository.init()
    _write(repository, "b.txt", b"b")
    _write(repository, "a.txt", b"a")
    _write(repository, "nested/c.txt", b"c")
    _write(repository, "build/out.bin", b"x")
    _write(repository, "deep/secret.log", b"x")
    _write(repository, ".git/config", b"x")
    commands.add(repository, ["b.txt"])
    assert commands.untracked_files(repository) == [".flitignore", "a.txt", "nested/c.txt"]


def test_format_status_lists_untracked(repo):
    _write(repo, "a.txt", b"a")
    text = commands.format_status(repo)
    assert text.startswith("On branch main\n")
    assert "Staged changes:" in text
    assert "Unstaged changes:" in text
    assert text.endswith("Untracked files\na.txt\n")


def test_write_tree_builds_nested_trees(repo):
    _write(repo, "top.txt", b"top")
    _write(repo, "dir/inner.txt", b"inner")
    commands.add(repo, ["top.txt", "dir"])
    tree = commands.write_tree(repo)
    by_name = {entry.name: entry for entry in tree.entries}
    assert by_name["top.txt"].type is TreeEntryType.BLOB
    assert by_name["top.txt"].object_hash == Blob(b"top").object_id()
    assert by_name["dir"].type is TreeEntryType.TREE
    subtree = repo.objects.retrieve_object(by_name["dir"].object_hash)
    assert isinstance(subtree, Tree)
    assert [(e.name, e.object_hash) for e in subtree.entries] == [
        ("inner.txt", Blob(b"inner").object_id())
    ]
    stored = repo.objects.retrieve_object(tree.object_id())
    assert stored == Tree(sorted(tree.entries, key=lambda e: e.name)) or stored.data() == tree.data()


def test_commit_updates_head_and_parents(repo):
    _write(repo, "a.txt", b"a")
    commands.add(repo, ["a.txt"])
    first = commands.commit(repo, "first")
    assert first.parent_hash == commands.ROOT_COMMIT
    assert repo.refs.read_ref("refs/heads/main") == first.object_id()
    stored = repo.objects.retrieve_object(first.object_id())
    assert isinstance(stored, CommitObject)
    assert stored.message == "first"

    _write(repo, "b.txt", b"b")
    commands.add(repo, ["b.txt"])
    second = commands.commit(repo, "second")
    assert second.parent_hash == first.object_id()
    assert repo.refs.read_ref("refs/heads/main") == second.object_id()


def test_log_without_commits_is_empty(repo):
    assert list(commands.log(repo)) == []


def test_log_walks_history_newest_first(repo):
    _write(repo, "a.txt", b"a")
    commands.add(repo, ["a.txt"])
    first = commands.commit(repo, "first")
    _write(repo, "a.txt", b"changed")
    commands.add(repo, ["a.txt"])
    second = commands.commit(repo, "second")

    entries = list(commands.log(repo))
    assert [e.commit_hash for e in entries] == [second.object_id(), first.object_id()]
    assert entries[0].parent_hash == first.object_id()
    assert entries[1].parent_hash is None
    assert entries[0].tree_hash == second.tree_hash
    assert entries[1].message == "first"
    rendered = str(entries[1])
    assert rendered.startswith(f"commit {first.object_id()}\ntree {first.tree_hash}\n")
    assert "parent" not in rendered
    assert rendered.endswith("    first\n")


def test_log_rejects_non_commit_head(repo):
    blob_hash = repo.objects.write_object(Blob(b"data"))
    repo.refs.write_ref("refs/heads/main", blob_hash)
    with pytest.raises(FlitError):
        list(commands.log(repo))


def test_display_hashes_sorted_and_complete(repo):
    hashes = [repo.objects.write_object(Blob(content)) for content in (b"x", b"y", b"z")]
    listed = commands.display_hashes(repo)
    assert listed == sorted(hashes)
    assert all(len(h) == 64 for h in listed)


def test_display_hashes_without_repository(tmp_path):
    with pytest.raises(FlitError):
        commands.display_hashes(Repository(tmp_path))


@pytest.fixture
def committed(repo):
    _write(repo, "a.txt", b"a")
    commands.add(repo, ["a.txt"])
    commands.commit(repo, "initial")
    return repo


def test_list_branches_marks_current(committed):
    assert commands.list_branches(committed) == [("main", True)]
    commands.create_branch(committed, "dev")
    assert commands.list_branches(committed) == [("dev", False), ("main", True)]
    assert committed.refs.read_ref("refs/heads/dev") == committed.refs.read_ref("refs/heads/main")


def test_create_branch_errors(repo):
    with pytest.raises(FlitError):
        commands.create_branch(repo, "dev")
    with pytest.raises(FlitError):
        commands.create_branch(repo, "")


def test_create_existing_branch_raises(committed):
    commands.create_branch(committed, "dev")
    with pytest.raises(FlitError):
        commands.create_branch(committed, "dev")


def test_delete_branch(committed):
    commands.create_branch(committed, "dev")
    commands.delete_branch(committed, "dev")
    assert commands.list_branches(committed) == [("main", True)]


def test_delete_branch_errors(committed):
    with pytest.raises(FlitError):
        commands.delete_branch(committed, "main")
    with pytest.raises(FlitError):
        commands.delete_branch(committed, "missing")
    with pytest.raises(FlitError):
        commands.delete_branch(committed, "")