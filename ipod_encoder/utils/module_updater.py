"""
This module provides the Modules class to locate and verify the external tools
required by the application, mplayer and ffmpeg.
"""
import subprocess
import sys

from loguru import logger

# Import the tools directory from the user configuration file.
from ..config.common import TOOLS_PATH
from ..config.video import DECODER_NAME, ENCODER_NAME


class Modules:
    """
    A utility class to handle operations related to the external tools.

    It reads the `tools_dir` from the user's `config.user.yaml` file to locate
    the executables, with a fallback to the system's PATH if no directory is
    configured or the executable is not found there.
    """

    # The flag each tool accepts to print its version and exit.
    VERSION_FLAGS = {DECODER_NAME: "-version", ENCODER_NAME: "-version"}

    @staticmethod
    def get_tool_path(tool_name: str) -> str:
        """
        Determines the executable path to use for `tool_name`.

        It prioritizes the configured `tools_dir`. If that is not set, or the tool
        is not found there, it falls back to the bare name, which relies on the
        executable being available in the system's PATH. On Windows the `.exe`
        suffix is added.

        Returns:
            A string containing the command or absolute path to the executable.
        """
        exe_name = f"{tool_name}.exe" if sys.platform == "win32" else tool_name

        if TOOLS_PATH and TOOLS_PATH.is_dir():
            configured_path = TOOLS_PATH / exe_name
            if configured_path.is_file():
                logger.trace(f"Using {tool_name} from configured path: '{configured_path}'")
                return str(configured_path)
            logger.warning(f"`tools_dir` is configured, but '{exe_name}' was not found there. Falling back to system PATH.")

        return tool_name

    @staticmethod
    def verify_tool(tool_name: str) -> bool:
        """
        Verifies that `tool_name` is installed, accessible, and can be executed.

        Runs the tool's version command and logs the first line of its output on
        success, or a detailed error message if the tool cannot be run.

        Returns:
            True if the version command ran successfully.
        """
        tool_cmd = Modules.get_tool_path(tool_name)
        version_flag = Modules.VERSION_FLAGS.get(tool_name, "-version")

        try:
            result = subprocess.run(
                [tool_cmd, version_flag],
                check=True,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                stdin=subprocess.DEVNULL,
            )
            version_output_lines = result.stdout.splitlines() or ["<no output>"]
            logger.info(f"{tool_name} version check successful: {version_output_lines[0]}")
            return True
        except subprocess.CalledProcessError as e:
            logger.error(f"{tool_name} version command failed (return code {e.returncode}):\n{e.stderr}")
        except FileNotFoundError:
            logger.error(
                f"{tool_name} command not found. Please ensure it is installed and accessible.\n"
                "You can either add it to your system's PATH or set `paths.tools_dir` in the 'config.user.yaml' file."
            )
        except OSError as e:
            logger.error(f"An unexpected error occurred while checking the {tool_name} version: {e}")
        return False

    @staticmethod
    def run_all() -> bool:
        """
        Runs all startup checks in sequence. Called once when the application starts.

        Returns:
            True if every tool passed its check.
        """
        results = [Modules.verify_tool(name) for name in (DECODER_NAME, ENCODER_NAME)]
        return all(results)
