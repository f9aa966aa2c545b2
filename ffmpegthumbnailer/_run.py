import logging
import subprocess

from ._utils import convert_kwargs_to_cmd_line_args


logger = logging.getLogger(__name__)


class Error(Exception):
    def __init__(self, cmd, stdout, stderr):
        super(Error, self).__init__(
            '{} error (see stderr output for detail)'.format(cmd)
        )
        self.stdout = stdout
        self.stderr = stderr


def compile(filename, input_kwargs=None, output_kwargs=None, cmd='ffmpeg'):
    """Build command-line for decoding ``filename`` to stdout.

    Input options are placed ahead of ``-i`` (e.g. ``ss`` for input
    seeking), output options after it, and the output always goes to
    ``pipe:``.
    """
    if isinstance(cmd, str):
        cmd = [cmd]
    elif type(cmd) != list:
        cmd = list(cmd)
    args = ['-hide_banner', '-loglevel', 'error', '-nostdin']
    args += convert_kwargs_to_cmd_line_args(input_kwargs or {})
    args += ['-i', filename]
    args += convert_kwargs_to_cmd_line_args(output_kwargs or {})
    args += ['pipe:']
    return cmd + args


def run(args, timeout=None):
    """Invoke ffmpeg with the supplied command line and capture its output.

    Args:
        args: full command line, as returned by :meth:`compile`.
        timeout: seconds to wait for the process before killing it.

    Returns: (out, err) tuple containing captured stdout and stderr data.

    Raises:
        :class:`Error`: if ffmpeg returns a non-zero exit code or times out.
    """
    logger.debug('Running {}'.format(' '.join(args)))
    process = subprocess.Popen(args, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    try:
        out, err = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        process.kill()
        out, err = process.communicate()
        raise Error(args[0], out, err)
    retcode = process.poll()
    if retcode:
        raise Error(args[0], out, err)
    return out, err


__all__ = ['compile', 'Error', 'run']
