# coding: utf8

from click.testing import CliRunner

from hondana import cli


def test_parse():
    runner = CliRunner()
    result = runner.invoke(
        cli.cli,
        [
            "parse",
            "-t",
            "Chainsaw Man",
            "Chainsaw Man v01 - 5.cbz",
            "Chainsaw Man - c001-007.cbz",
            "Chainsaw Man.cbz",
        ],
    )

    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "Chainsaw Man v01 - 5.cbz: chapter 5, volume 1",
        "Chainsaw Man - c001-007.cbz: chapter 1, volume ?, range 1-7",
        "Chainsaw Man.cbz: chapter ?, volume ?",
    ]


def test_parse_exclusions(tmp_path):
    path = tmp_path / "exclusions.txt"
    path.write_text("Chainsaw Man 2\n", encoding="utf8")

    runner = CliRunner()
    result = runner.invoke(
        cli.cli,
        ["parse", "-t", "Chainsaw Man 2", "-e", str(path), "Chainsaw Man 2123.cbz"],
    )

    assert result.exit_code == 0
    assert result.output.strip() == "Chainsaw Man 2123.cbz: chapter ?, volume ?"


def test_parse_needs_title():
    result = CliRunner().invoke(cli.cli, ["parse", "Chainsaw Man v01.cbz"])

    assert result.exit_code != 0


def test_list():
    result = CliRunner().invoke(cli.cli, ["list"])

    assert result.exit_code == 0
    assert "madokami" in result.output


def test_unknown_domain():
    result = CliRunner().invoke(cli.cli, ["info", "https://example.com/manga/1"])

    assert result.exit_code == 1
    assert "no source found" in result.output


def test_parse_year_threshold():
    runner = CliRunner()

    result = runner.invoke(cli.cli, ["parse", "-t", "Berserk", "Berserk 2019.cbz"])
    assert result.output.strip() == "Berserk 2019.cbz: chapter ?, volume ?"

    result = runner.invoke(
        cli.cli, ["parse", "-t", "Berserk", "-y", "0", "Berserk 2019.cbz"]
    )
    assert result.exit_code == 0
    assert result.output.strip() == "Berserk 2019.cbz: chapter 2019, volume ?"
