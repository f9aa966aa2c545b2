"""Decoder backend built on the ``ffprobe`` and ``ffmpeg`` executables.

:class:`MovieDecoder` opens a container with ffprobe, then every decode is a
single ffmpeg run writing one raw RGB24 frame to stdout.
"""
import datetime
import logging
import subprocess

from ._errors import DecodeFailed, OpenFailed, SeekFailed
from ._frame import calculate_dimensions
from ._probe import probe
from ._run import Error, compile, run
from ._utils import parse_rate


logger = logging.getLogger(__name__)

# Used when a stream does not report its frame rate.
DEFAULT_FRAME_RATE = 25.0


def _decode_stderr(stderr):
    if not stderr:
        return ''
    return stderr.decode('utf-8', errors='replace').strip()


def _is_attached_pic(stream):
    return int(stream.get('disposition', {}).get('attached_pic', 0)) == 1


def _parse_duration(*candidates):
    for candidate in candidates:
        try:
            seconds = float(candidate)
        except (TypeError, ValueError):
            continue
        if seconds > 0:
            return seconds
    return 0.0


class MovieDecoder(object):
    """Decoding session for one video file.

    Opening probes the container and picks the stream to decode: the
    embedded cover art when it is preferred and present, the first regular
    video stream otherwise.
    """

    def __init__(
        self,
        filename,
        prefer_embedded_metadata=True,
        cmd='ffmpeg',
        probe_cmd='ffprobe',
        timeout=None,
    ):
        self.filename = filename
        self.prefer_embedded_metadata = prefer_embedded_metadata
        self.cmd = cmd
        self.timeout = timeout
        self._primed = False
        self._position = None
        self._seeked = False

        logger.debug('Opening {!r}'.format(filename))
        try:
            info = probe(filename, cmd=probe_cmd, timeout=timeout)
        except Error as e:
            raise OpenFailed(
                'Could not open {}: {}'.format(filename, _decode_stderr(e.stderr)),
                e.stderr,
            )
        except subprocess.TimeoutExpired:
            raise OpenFailed('Timed out probing {}'.format(filename))
        except OSError as e:
            raise OpenFailed('Could not run {}: {}'.format(probe_cmd, e))
        except ValueError as e:
            raise OpenFailed('Unreadable ffprobe output for {}: {}'.format(filename, e))

        video_streams = [
            s for s in info.get('streams', []) if s.get('codec_type') == 'video'
        ]
        self._video_stream = next(
            (s for s in video_streams if not _is_attached_pic(s)), None
        )
        self._cover_stream = next(
            (s for s in video_streams if _is_attached_pic(s)), None
        )
        self._use_cover = prefer_embedded_metadata and self._cover_stream is not None
        if self._video_stream is None and not self._use_cover:
            raise OpenFailed('No video stream found in {}'.format(filename))

        stream = self._cover_stream if self._use_cover else self._video_stream
        try:
            self.source_width = int(stream['width'])
            self.source_height = int(stream['height'])
        except (KeyError, TypeError, ValueError):
            self.source_width = self.source_height = 0
        if self.source_width <= 0 or self.source_height <= 0:
            raise OpenFailed('Video stream of {} has no dimensions'.format(filename))
        self._stream_index = int(stream['index'])

        if self._video_stream is not None:
            self._duration = _parse_duration(
                self._video_stream.get('duration'),
                info.get('format', {}).get('duration'),
            )
            self._frame_rate = (
                parse_rate(self._video_stream.get('avg_frame_rate'))
                or parse_rate(self._video_stream.get('r_frame_rate'))
                or DEFAULT_FRAME_RATE
            )
        else:
            self._duration = 0.0
            self._frame_rate = DEFAULT_FRAME_RATE

    def __repr__(self):
        return 'MovieDecoder({!r}, stream={}, {}x{})'.format(
            self.filename, self._stream_index, self.source_width, self.source_height
        )

    def _check_primed(self):
        if not self._primed:
            raise RuntimeError('decode_video_frame() must be called first')

    def _decode(self, width, height, input_kwargs, output_kwargs):
        args = compile(
            self.filename,
            input_kwargs=input_kwargs,
            output_kwargs=output_kwargs,
            cmd=self.cmd,
        )
        try:
            out, _ = run(args, timeout=self.timeout)
        except Error as e:
            raise DecodeFailed(
                'Could not decode {}: {}'.format(self.filename, _decode_stderr(e.stderr)),
                e.stderr,
            )
        except OSError as e:
            raise DecodeFailed('Could not run {}: {}'.format(self.cmd, e))

        frame_size = width * height * 3
        if len(out) == 0 and self._seeked:
            raise SeekFailed(
                'No frame found at {}s in {}'.format(self._position, self.filename)
            )
        if len(out) < frame_size:
            raise DecodeFailed(
                'Expected {} bytes of frame data from {}, got {}'.format(
                    frame_size, self.filename, len(out)
                )
            )
        return out[:frame_size]

    def _input_kwargs(self):
        kwargs = {'noautorotate': None}
        if self._position is not None and not self._use_cover:
            kwargs['ss'] = '{:.3f}'.format(self._position)
        return kwargs

    def _output_kwargs(self, video_filter=None):
        kwargs = {
            'map': '0:{}'.format(self._stream_index),
            'frames:v': 1,
            'f': 'rawvideo',
            'pix_fmt': 'rgb24',
        }
        if video_filter is not None:
            kwargs['vf'] = video_filter
        return kwargs

    def decode_video_frame(self):
        """Decode one frame at the current position.

        Must run once before the duration or the embedded metadata are
        queried.
        """
        logger.debug('Decoding priming frame of {!r}'.format(self.filename))
        self._decode(
            self.source_width,
            self.source_height,
            self._input_kwargs(),
            self._output_kwargs(),
        )
        self._primed = True

    def embedded_metadata_is_available(self):
        self._check_primed()
        return self._use_cover

    def get_video_duration(self):
        self._check_primed()
        return datetime.timedelta(seconds=self._duration)

    def seek(self, target_seconds):
        """Move the decode position to ``target_seconds``.

        A target at the very end of the stream lands on its final frame.

        Raises:
            :class:`SeekFailed`: if the target is outside the stream or the
                stream has no known duration.
        """
        self._check_primed()
        if target_seconds < 0:
            raise SeekFailed('Cannot seek to negative time {}s'.format(target_seconds))
        if self._duration <= 0:
            if target_seconds == 0:
                self._position = None
                return
            raise SeekFailed('{} is not seekable'.format(self.filename))
        if target_seconds > self._duration:
            raise SeekFailed(
                'Seek target {}s is beyond the duration of {} ({:.3f}s)'.format(
                    target_seconds, self.filename, self._duration
                )
            )
        last_frame = max(0.0, self._duration - 1.5 / self._frame_rate)
        self._position = min(float(target_seconds), last_frame)
        self._seeked = True
        logger.debug('Seeking {!r} to {:.3f}s'.format(self.filename, self._position))

    def get_scaled_video_frame(self, size, maintain_aspect_ratio, video_frame):
        """Decode a frame scaled according to ``size`` into ``video_frame``."""
        width, height = calculate_dimensions(
            self.source_width, self.source_height, size, maintain_aspect_ratio
        )
        logger.debug(
            'Scaling {}x{} frame of {!r} to {}x{}'.format(
                self.source_width, self.source_height, self.filename, width, height
            )
        )
        data = self._decode(
            width,
            height,
            self._input_kwargs(),
            self._output_kwargs('scale={}:{}:flags=bicubic'.format(width, height)),
        )
        video_frame.width = width
        video_frame.height = height
        video_frame.source_width = self.source_width
        video_frame.source_height = self.source_height
        video_frame.data = bytearray(data)


__all__ = ['MovieDecoder']
