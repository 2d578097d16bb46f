import inspect

from conftest import py
from ipod_encoder.utils.ffmpeg_utils import display_cmd, run_cmd


def test_display_cmd_quotes_arguments():
    assert display_cmd(["ffmpeg", "-metadata", "title=My Show"]) == "ffmpeg -metadata 'title=My Show'"


def test_run_cmd_captures_output():
    result = run_cmd(py("import sys\nprint('out')\nsys.stderr.write('err')\nsys.exit(3)\n"), show_cmd=True)
    assert result.returncode == 3
    assert result.stdout == "out\n"
    assert result.stderr == "err"


def test_run_cmd_without_tool(tmp_path):
    assert run_cmd([str(tmp_path / "no-such-tool")]) is None
    assert run_cmd([]) is None


def test_run_cmd_only_runs_commands():
    assert list(inspect.signature(run_cmd).parameters) == ["cmd_list", "show_cmd"]
