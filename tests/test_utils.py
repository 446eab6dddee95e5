# coding: utf8

import json

import pytest

from hondana import utils


@pytest.mark.parametrize(
    "string,decoded",
    [
        ("%41%42", "AB"),
        ("Vinland%20Saga", "Vinland Saga"),
        ("%C3%A9t%C3%A9", "été"),
        ("100%", "100%"),
        ("50%4", "50%4"),
        ("%zz", "%zz"),
        ("a+b", "a+b"),
    ],
)
def test_url_decode(string, decoded):
    assert utils.url_decode(string) == decoded


def test_url_decode_identity():
    name = "Hunter x Hunter 400 (2022) (Digital) (LuCaZ).cbz"
    assert utils.url_decode(name) == name


def test_url_encode():
    assert utils.url_encode("Vinland Saga/01.jpg") == "Vinland%20Saga%2F01.jpg"
    assert utils.url_encode("a-b_c.d!~*'") == "a-b_c.d!~*'"
    assert utils.url_encode("[x]") == "%5Bx%5D"


def test_unescape():
    assert utils.unescape("Tom &amp; Jerry") == "Tom & Jerry"
    assert utils.unescape("&lt;b&gt; &quot;x&quot; &#39;y&apos;") == "<b> \"x\" 'y'"
    assert utils.unescape("a&nbsp;b") == "a b"
    # single pass only
    assert utils.unescape("&amp;lt;") == "&lt;"
    # not in the table
    assert utils.unescape("&copy; &#169;") == "&copy; &#169;"


@pytest.mark.parametrize(
    "name,stripped",
    [
        ("Berserk v01.cbz", "Berserk v01"),
        ("Berserk V01.CBZ", "Berserk V01"),
        ("cover.jpeg", "cover"),
        ("archive.7z", "archive"),
        ("Berserk.cbz.zip", "Berserk.cbz"),
        ("Berserk.tar", "Berserk.tar"),
        ("Berserk", "Berserk"),
        ("", ""),
    ],
)
def test_strip_extension(name, stripped):
    assert utils.strip_extension(name) == stripped


def test_normalize():
    assert utils.normalize("  Chainsaw%20Man V01.CBZ ") == "chainsaw man v01"
    assert utils.normalize("Tom &amp; Jerry - 5.pdf") == "tom & jerry - 5"
    assert utils.normalize("") == ""


def test_sanitize():
    assert utils.sanitize("Slice of Life") == "slice_of_life"
    assert utils.sanitize("  Sci-Fi!  ") == "sci_fi"


def test_plural():
    assert utils.plural(1, "chapter") == "1 chapter"
    assert utils.plural(3, "chapter") == "3 chapters"
    assert utils.plural(0, "volume") == "0 volumes"


def test_config_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("HONDANA_MADOKAMI_USERNAME", raising=False)

    config = utils.Config(tmp_path / "config.json")

    assert config["lang"] == "en"
    assert config["year_threshold"] == 1900
    assert config.get("madokami.username", "") == ""


def test_config_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("HONDANA_MADOKAMI_USERNAME", "reader")
    monkeypatch.delenv("HONDANA_MADOKAMI_PASSWORD", raising=False)

    config = utils.Config(tmp_path / "config.json")

    assert config["madokami.username"] == "reader"
    assert config.get("madokami.password") is None

    with pytest.raises(KeyError):
        config["madokami.password"]


def test_config_persists(tmp_path):
    path = tmp_path / "nested" / "config.json"

    with utils.Config(path) as config:
        config["lang"] = "fr"

    assert json.loads(path.read_text(encoding="utf8"))["lang"] == "fr"
    assert utils.Config(path)["lang"] == "fr"
