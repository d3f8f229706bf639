"""FFmpeg command compilation.

This module turns the option model into an ordered argument vector:

    [global options] {[input options] -i <input>}... [output options] <output>

Compilation is all-or-nothing: the first failing option aborts with an
OptionError naming its position, and no partial command is returned.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ffcompose.exceptions import OptionError
from ffcompose.options.models import GlobalOptions, Input, Output

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FFmpegCommand:
    """A compiled ffmpeg invocation.

    Attributes:
        args: Argument vector, without the binary path.
        env: Environment variables to add to the process environment.
    """

    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)

    def argv(self, binary: str | Path) -> list[str]:
        """Full argument vector with the binary path prepended."""
        return [str(binary), *self.args]

    def __str__(self) -> str:
        return shlex.join(self.args)


def build_command(
    global_options: GlobalOptions | None,
    inputs: Sequence[Input],
    output: Output,
) -> FFmpegCommand:
    """Compile the option model into an ffmpeg command.

    Args:
        global_options: Global options (None for none).
        inputs: Inputs in the order ffmpeg should number them.
        output: The single output.

    Returns:
        FFmpegCommand with the argument vector and environment additions.

    Raises:
        OptionError: If any option fails to render. The outermost error
            names "global", "input" (with its index) or "output".
    """
    args: list[str] = []
    env: dict[str, str] = {}

    if global_options is not None:
        try:
            global_options.append_to(args, env)
        except OptionError as e:
            raise OptionError("global", e) from e

    for idx, item in enumerate(inputs):
        try:
            item.append_to(args, env)
        except OptionError as e:
            raise OptionError("input", e, index=idx) from e

    try:
        output.append_to(args, env)
    except OptionError as e:
        raise OptionError("output", e) from e

    command = FFmpegCommand(args=args, env=env)
    logger.debug("Compiled ffmpeg command: %s", command)
    return command
