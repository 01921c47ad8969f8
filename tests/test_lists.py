"""Tests for language, file and keyword lists."""

import os

import pytest

from voxsigma.lists import FileList, Keyword, KeywordList, LanguageList, ListFile


def test_line_list_deduplicates_in_order():
    languages = LanguageList(["fre", "eng", "fre"]).add("spa").add("eng")

    assert languages.all() == ["fre", "eng", "spa"]
    assert list(languages) == ["fre", "eng", "spa"]
    assert len(languages) == 3
    assert languages.to_file_content() == "fre\neng\nspa\n"


def test_empty_list_is_falsy():
    assert not FileList()
    assert FileList().to_file_content() == ""


def test_write_to_file(tmp_path):
    path = tmp_path / "files.lst"
    FileList(["/data/a.xml", "/data/b.xml"]).write_to_file(path)

    assert path.read_text() == "/data/a.xml\n/data/b.xml\n"


def test_write_to_temp_file(tmp_path):
    path = LanguageList(["fre"]).write_to_temp_file(str(tmp_path))

    assert os.path.dirname(path) == str(tmp_path)
    assert os.path.basename(path).startswith("voxsigma_ll_")
    with open(path) as f:
        assert f.read() == "fre\n"


def test_keyword_line_format():
    assert Keyword("K1", 0.5, "bonjour").to_line() == "K1 0.50 bonjour"


def test_keyword_auto_ids():
    keywords = KeywordList().add_keyword("hello").add_keyword("world", threshold=0.75)

    assert keywords.to_file_content() == "KW001 0.50 hello\nKW002 0.75 world\n"


def test_auto_ids_skip_used_ids():
    keywords = KeywordList().add("KW001", 0.4, "manual").add_keyword("auto")

    assert [k.id for k in keywords] == ["KW001", "KW002"]


def test_duplicate_keyword_id_rejected():
    keywords = KeywordList().add("K1", 0.5, "one")

    with pytest.raises(ValueError, match="K1"):
        keywords.add("K1", 0.5, "two")


def test_keyword_list_temp_file(tmp_path):
    keywords = KeywordList().add_keyword("bonjour")
    path = keywords.write_to_temp_file(str(tmp_path))

    assert path.endswith(".kwl")
    assert len(keywords) == 1
    with open(path) as f:
        assert f.read() == "KW001 0.50 bonjour\n"


def test_keyword_list_write_to_file(tmp_path):
    """Test keyword lists share the file writer of the other lists."""
    path = tmp_path / "keywords.kwl"
    keywords = KeywordList().add("K1", 0.7, "au revoir").add_keyword("merci", 0.25)

    assert isinstance(keywords, ListFile)
    assert keywords.write_to_file(path) == str(path)
    assert path.read_text() == "K1 0.70 au revoir\nKW001 0.25 merci\n"
