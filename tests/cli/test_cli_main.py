import pytest

from rolegate import cli


def test_main_version_returns_ok(capsys):
    rc = cli.main(["--version"])
    out = capsys.readouterr().out
    assert rc == cli.EXIT_OK
    assert out.startswith("rolegate ")


def test_main_without_subcommand_prints_usage(capsys):
    rc = cli.main([])
    out = capsys.readouterr().out
    assert rc == cli.EXIT_USAGE
    assert "usage:" in out.lower()


def test_main_unknown_flag_raises_systemexit():
    with pytest.raises(SystemExit) as e:
        cli.main(["--no-such-flag"])
    assert e.value.code != 0


def test_build_parser_lists_commands():
    help_text = cli.build_parser().format_help()
    for cmd in ("validate", "roles", "check", "--version"):
        assert cmd in help_text


def test_check_requires_permission():
    with pytest.raises(SystemExit):
        cli.main(["check", "writer"])


def test_print_helper_appends_single_newline(capsys):
    cli._print("line\n")
    cli._print(3)
    assert capsys.readouterr().out == "line\n3\n"


@pytest.mark.parametrize(
    "values,expected",
    [
        ([], {}),
        (["a"], {"a": True}),
        (["a=yes", "b=0"], {"a": True, "b": False}),
        ([" c = TRUE "], {"c": True}),
    ],
)
def test_parse_attr_flags(values, expected):
    assert cli._parse_attr_flags(values) == expected


@pytest.mark.parametrize("bad", ["=true", "a=maybe"])
def test_parse_attr_flags_rejects(bad):
    with pytest.raises(ValueError):
        cli._parse_attr_flags([bad])
