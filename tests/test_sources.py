"""Tests for reading post files from a content directory."""

from datetime import datetime, timezone

import nbformat
import pytest
from nbformat import v4

from postcatalog.errors import ValidationError
from postcatalog.loader import load
from postcatalog.sources import iter_content, read_markdown, read_notebook


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_read_markdown_splits_front_matter(tmp_path):
    path = _write(
        tmp_path / "hello.md",
        "\ufeff---\r\ntitle: Hello\r\ndate: 2024-01-05\r\ntags: [a]\r\n---\r\nBody\r\n",
    )

    entry = read_markdown(path, "hello.md")

    assert entry.path == "hello.md"
    assert entry.front_matter["title"] == "Hello"
    assert entry.front_matter["tags"] == ["a"]
    assert entry.body == "Body\n"


def test_markdown_without_front_matter_fails_on_title(tmp_path):
    _write(tmp_path / "bare.md", "# Just a heading\n")

    with pytest.raises(ValidationError) as exc_info:
        load(iter_content(tmp_path))

    assert exc_info.value.slug == "bare"
    assert exc_info.value.field == "title"


def test_malformed_yaml_is_a_validation_error(tmp_path):
    _write(tmp_path / "broken.md", "---\ntitle: [oops\n---\nbody\n")

    with pytest.raises(ValidationError) as exc_info:
        list(iter_content(tmp_path))

    assert exc_info.value.slug == "broken"
    assert exc_info.value.field == "front_matter"


def test_iter_content_walks_post_files_in_order(tmp_path):
    fm = "---\ntitle: T\ndate: 2024-01-01\n---\n"
    _write(tmp_path / "post-10.md", fm)
    _write(tmp_path / "post-2.mdx", fm)
    _write(tmp_path / "series" / "part-1" / "index.md", fm)
    _write(tmp_path / "notes.txt", "not a post")
    _write(tmp_path / "_drafts" / "wip.md", fm)
    _write(tmp_path / ".ipynb_checkpoints" / "x-checkpoint.md", fm)

    paths = [e.path for e in iter_content(tmp_path)]

    assert paths == ["post-2.mdx", "post-10.md", "series/part-1/index.md"]
    assert set(load(iter_content(tmp_path))) == {"post-2", "post-10", "series/part-1"}


def test_missing_content_dir_yields_nothing(tmp_path):
    assert list(iter_content(tmp_path / "nope")) == []


def _notebook(cells, **metadata):
    nb = v4.new_notebook(cells=cells)
    nb.metadata.update(metadata)
    return nb


def test_notebook_front_matter_from_raw_cell(tmp_path):
    nb = _notebook(
        [
            v4.new_raw_cell("---\ntitle: From Raw\ndate: 2024-02-02\ntags: [jupyter]\n---"),
            v4.new_markdown_cell("Visible paragraph."),
            v4.new_markdown_cell("Secret notes.", metadata={"tags": ["remove-cell"]}),
            v4.new_code_cell("x = 1"),
        ]
    )
    path = tmp_path / "nb.ipynb"
    nbformat.write(nb, str(path))

    entry = read_notebook(path, "nb.ipynb")

    assert entry.front_matter["title"] == "From Raw"
    assert "Visible paragraph." in entry.body
    assert "x = 1" in entry.body
    assert "Secret notes." not in entry.body
    assert "title: From Raw" not in entry.body


def test_notebook_front_matter_from_metadata(tmp_path):
    nb = _notebook(
        [v4.new_markdown_cell("Hello from a notebook.")],
        title="Meta Title",
        date="2024-03-03",
        tags=["ml"],
        kernelspec={"name": "python3", "display_name": "Python 3"},
    )
    path = tmp_path / "analysis" / "index.ipynb"
    path.parent.mkdir()
    nbformat.write(nb, str(path))

    catalog = load(iter_content(tmp_path))
    post = catalog["analysis"]

    assert post.title == "Meta Title"
    assert post.date == datetime(2024, 3, 3, tzinfo=timezone.utc)
    assert post.tags == frozenset({"ml"})
    assert "Hello from a notebook." in post.body


def test_broken_notebook_is_a_validation_error(tmp_path):
    _write(tmp_path / "broken.ipynb", "this is not json")

    with pytest.raises(ValidationError) as exc_info:
        list(iter_content(tmp_path))

    assert exc_info.value.slug == "broken"
    assert exc_info.value.field == "notebook"


def test_impossible_calendar_date_is_a_validation_error(tmp_path):
    """YAML would choke on Feb 30 itself; the record check names the field."""
    _write(tmp_path / "leap.md", "---\ntitle: Leap\ndate: 2024-02-30\n---\nbody\n")

    with pytest.raises(ValidationError) as exc_info:
        load(iter_content(tmp_path))

    assert exc_info.value.slug == "leap"
    assert exc_info.value.field == "date"


def test_unquoted_yaml_timestamp_still_loads(tmp_path):
    _write(
        tmp_path / "stamp.md",
        "---\ntitle: Stamp\ndate: 2024-02-29 18:30:00\n---\nbody\n",
    )

    post = load(iter_content(tmp_path))["stamp"]

    assert post.date == datetime(2024, 2, 29, 18, 30, tzinfo=timezone.utc)


def test_non_utf8_markdown_is_a_validation_error(tmp_path):
    (tmp_path / "latin.md").write_bytes(b"\xff\xfe---\ntitle: caf\xe9\n---\n")

    with pytest.raises(ValidationError) as exc_info:
        list(iter_content(tmp_path))

    assert exc_info.value.slug == "latin"
    assert exc_info.value.field == "encoding"
