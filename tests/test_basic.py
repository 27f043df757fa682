"""Basic tests for albumnote."""

from importlib.util import find_spec

from typer.testing import CliRunner


def test_import():
    """Test that package is importable without side effects."""
    assert find_spec("albumnote") is not None


def test_cli_import():
    from albumnote.cli import app

    assert app is not None


def test_help_footer_contains_usage_tip():
    from albumnote.cli import app

    result = CliRunner().invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Use `albumnote [COMMAND] --help`" in result.output


def test_version():
    from albumnote import __version__
    from albumnote.cli import app

    result = CliRunner().invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_short_version_flag_needs_no_command():
    from albumnote import __version__
    from albumnote.cli import app

    result = CliRunner().invoke(app, ["-v"])
    assert result.exit_code == 0, result.output
    assert f"albumnote v{__version__}" in result.output
    assert "Missing command" not in result.output
