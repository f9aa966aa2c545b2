import json
import logging
import subprocess

from ._run import Error
from ._utils import convert_kwargs_to_cmd_line_args


logger = logging.getLogger(__name__)


def probe(filename, cmd='ffprobe', timeout=None, **kwargs):
    """Describe the streams and container format of ``filename``.

    Args:
        timeout: seconds to wait for ffprobe; on expiry the process is
            killed and reaped before :class:`subprocess.TimeoutExpired`
            propagates.
        **kwargs: extra ffprobe options, e.g. ``select_streams='v'``.

    Returns: the parsed ``-of json`` output, with ``streams`` and ``format``
        keys.

    Raises:
        :class:`ffmpegthumbnailer.Error`: if ffprobe exits non-zero; its
            stderr is kept on the ``stderr`` property.
    """
    args = [cmd, '-show_format', '-show_streams', '-of', 'json']
    args += convert_kwargs_to_cmd_line_args(kwargs)
    args += [filename]

    logger.debug('Running {}'.format(' '.join(args)))
    process = subprocess.Popen(args, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    try:
        out, err = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        process.kill()
        process.communicate()
        raise
    if process.returncode != 0:
        raise Error(cmd, out, err)
    return json.loads(out.decode('utf-8'))


__all__ = ['probe']
