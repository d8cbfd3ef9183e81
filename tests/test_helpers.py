import os
import json
import re
import pandas as pd
import pytest
from datetime import datetime

from ontoelim.utils.helpers import (
    ensure_directory,
    generate_run_id,
    generate_timestamp,
    get_file_extension,
    read_gene_list,
    safe_json_serialize,
    save_metadata,
)


def test_ensure_directory(tmp_path):
    target = tmp_path / "a" / "b"
    path = ensure_directory(str(target))
    assert os.path.isdir(path)
    assert os.path.isabs(path)
    # Calling twice is fine
    assert ensure_directory(str(target)) == path


def test_generate_timestamp_and_run_id():
    assert re.fullmatch(r"\d{8}_\d{6}", generate_timestamp())
    assert re.fullmatch(r"genes_\d{8}_\d{6}", generate_run_id("genes"))


def test_get_file_extension():
    assert get_file_extension("/tmp/genes.TXT") == "txt"
    assert get_file_extension("genes") == ""


def test_read_gene_list_text(tmp_path):
    path = tmp_path / "genes.txt"
    path.write_text("GENE1\n\n  GENE2  \nGENE1\n")
    assert read_gene_list(str(path)) == ["GENE1", "GENE2", "GENE1"]


def test_read_gene_list_json(tmp_path):
    as_list = tmp_path / "list.json"
    as_list.write_text(json.dumps(["GENE1", "GENE2"]))
    as_dict = tmp_path / "dict.json"
    as_dict.write_text(json.dumps({"genes": ["GENE3"]}))

    assert read_gene_list(str(as_list)) == ["GENE1", "GENE2"]
    assert read_gene_list(str(as_dict)) == ["GENE3"]


def test_read_gene_list_bad_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"other": 1}))
    with pytest.raises(ValueError):
        read_gene_list(str(path))


def test_read_gene_list_missing():
    with pytest.raises(FileNotFoundError):
        read_gene_list("/path/does/not/exist.txt")


def test_safe_json_serialize():
    assert safe_json_serialize({"B", "A"}) == ["A", "B"]
    assert safe_json_serialize(("x", "y")) == ["x", "y"]
    assert safe_json_serialize(datetime(2024, 1, 2)) == "2024-01-02T00:00:00"
    assert safe_json_serialize(pd.DataFrame({"a": [1]})) == [{"a": 1}]


def test_save_metadata(tmp_path):
    path = tmp_path / "meta" / "run.json"
    out = save_metadata({"genes": {"B", "A"}, "n": 2}, str(path))
    with open(out) as f:
        data = json.load(f)
    assert data == {"genes": ["A", "B"], "n": 2}
