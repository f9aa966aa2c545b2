from collections import namedtuple
import asyncio
import contextlib
import functools
import logging
import os

from ._decoder import MovieDecoder
from ._encoders import OutputFormat, encode, format_from_path
from ._errors import (
    InvalidConfiguration,
    InvalidQuality,
    InvalidSeekPercentage,
    IoFailed,
    TaskFailed,
    ThumbnailerError,
)
from ._filters import film_strip_filter
from ._frame import Dimensions, Size, VideoFrame
from ._utils import round_half_up


logger = logging.getLogger(__name__)


ThumbnailerConfig = namedtuple(
    'ThumbnailerConfig',
    [
        'size',
        'maintain_aspect_ratio',
        'seek_percentage',
        'quality',
        'prefer_embedded_metadata',
        'with_film_strip',
        'cmd',
        'probe_cmd',
        'timeout',
    ],
)
ThumbnailerConfig.__new__.__defaults__ = (
    Size(128),
    True,
    0.1,
    80.0,
    True,
    True,
    'ffmpeg',
    'ffprobe',
    None,
)


def _check_seek_percentage(seek_percentage):
    if not 0.0 <= seek_percentage <= 1.0:
        raise InvalidSeekPercentage(seek_percentage)
    return seek_percentage


def _check_quality(quality):
    if not 0.0 <= quality <= 100.0:
        raise InvalidQuality(quality)
    return quality


def _to_size(size):
    if isinstance(size, (Size, Dimensions)):
        return size
    if isinstance(size, int):
        return Size(size)
    width, height = size
    return Dimensions(width, height)


def build_thumbnailer(executor=None, **options):
    """Build a :class:`Thumbnailer` from keyword options, validating all of them at once.

    Options and defaults: ``size=128`` (an edge length, a ``(width,
    height)`` pair, :class:`Size` or :class:`Dimensions`),
    ``maintain_aspect_ratio=True``, ``seek_percentage=0.1``,
    ``quality=80.0``, ``prefer_embedded_metadata=True``,
    ``with_film_strip=True``, ``cmd='ffmpeg'``, ``probe_cmd='ffprobe'``,
    ``timeout=None``.

    Raises:
        :class:`InvalidConfiguration`: listing every invalid option.
        TypeError: for unknown option names.
    """
    unknown = set(options) - set(ThumbnailerConfig._fields)
    if unknown:
        raise TypeError('Unknown thumbnailer options: {}'.format(', '.join(sorted(unknown))))
    config = ThumbnailerConfig(**options)._replace(size=_to_size(options.get('size', 128)))

    errors = []
    for check, value in (
        (_check_seek_percentage, config.seek_percentage),
        (_check_quality, config.quality),
    ):
        try:
            check(value)
        except ThumbnailerError as e:
            errors.append(e)
    if errors:
        raise InvalidConfiguration(errors)
    return Thumbnailer(config, executor=executor)


class ThumbnailerBuilder(object):
    """Fluent configuration for a :class:`Thumbnailer`.

    Defaults:

    - ``maintain_aspect_ratio``: True
    - ``size``: 128 pixels
    - ``seek_percentage``: 10%
    - ``quality``: 80
    - ``prefer_embedded_metadata``: True
    - ``with_film_strip``: True

    Example::

        thumbnailer = (
            ThumbnailerBuilder()
            .size(256)
            .seek_percentage(0.25)
            .with_film_strip(False)
            .build()
        )
        container = await thumbnailer.process_to_bytes('in.mp4', OutputFormat.PNG)
    """

    def __init__(self):
        self._config = ThumbnailerConfig()

    def __repr__(self):
        return 'ThumbnailerBuilder({!r})'.format(self._config)

    def _set(self, **kwargs):
        self._config = self._config._replace(**kwargs)
        return self

    def maintain_aspect_ratio(self, maintain_aspect_ratio):
        """Whether the generated thumbnail keeps the aspect ratio of the video."""
        return self._set(maintain_aspect_ratio=maintain_aspect_ratio)

    def size(self, size):
        """Set a thumbnail edge length; the other edge follows ``maintain_aspect_ratio``."""
        return self._set(size=Size(size))

    def width_and_height(self, width, height):
        return self._set(size=Dimensions(width, height))

    def seek_percentage(self, seek_percentage):
        """Seek percentage must be a value between 0.0 and 1.0."""
        return self._set(seek_percentage=_check_seek_percentage(seek_percentage))

    def quality(self, quality):
        """Quality must be a value between 0.0 and 100.0."""
        return self._set(quality=_check_quality(quality))

    def prefer_embedded_metadata(self, prefer_embedded_metadata):
        """Use cover art embedded in the video, when there is one, instead of a frame."""
        return self._set(prefer_embedded_metadata=prefer_embedded_metadata)

    def with_film_strip(self, with_film_strip):
        return self._set(with_film_strip=with_film_strip)

    def ffmpeg_cmd(self, cmd):
        return self._set(cmd=cmd)

    def ffprobe_cmd(self, probe_cmd):
        return self._set(probe_cmd=probe_cmd)

    def timeout(self, timeout):
        """Seconds each ffmpeg/ffprobe process may run."""
        return self._set(timeout=timeout)

    def build(self, executor=None):
        """Build a :class:`Thumbnailer`.

        Args:
            executor: :class:`concurrent.futures.Executor` running the
                blocking decode and encode work; the event loop's default
                executor when None.
        """
        return Thumbnailer(self._config, executor=executor)


class Thumbnailer(object):
    """Generates thumbnails from video files with a frozen configuration.

    The coroutine methods run decoding, encoding and file writing in
    ``executor`` so the event loop is never blocked; a single instance can
    serve any number of concurrent calls.
    """

    def __init__(self, config=None, executor=None):
        self.config = config if config is not None else ThumbnailerConfig()
        self.executor = executor

    def __repr__(self):
        return 'Thumbnailer({!r})'.format(self.config)

    async def _run_blocking(self, func, *args):
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self.executor, functools.partial(func, *args))
        except ThumbnailerError:
            raise
        except Exception as e:
            raise TaskFailed('{} failed: {!r}'.format(func.__name__, e)) from e

    def extract_frame(self, video_file_path):
        """Decode, seek, scale and optionally decorate one frame (blocking)."""
        config = self.config
        decoder = MovieDecoder(
            os.fspath(video_file_path),
            config.prefer_embedded_metadata,
            cmd=config.cmd,
            probe_cmd=config.probe_cmd,
            timeout=config.timeout,
        )
        # A frame has to be decoded before the duration and metadata can be trusted.
        decoder.decode_video_frame()

        if not decoder.embedded_metadata_is_available():
            seconds = int(decoder.get_video_duration().total_seconds())
            decoder.seek(round_half_up(seconds * config.seek_percentage))

        video_frame = VideoFrame()
        decoder.get_scaled_video_frame(config.size, config.maintain_aspect_ratio, video_frame)

        if config.with_film_strip:
            film_strip_filter(video_frame)

        return video_frame

    def encode(self, video_frame, output_format):
        """Encode a finished frame (blocking)."""
        return encode(video_frame, output_format, self.config.quality)

    async def process_to_video_frame(self, video_file_path):
        """Process a video file into a scaled :class:`VideoFrame`."""
        return await self._run_blocking(self.extract_frame, video_file_path)

    async def process_to_bytes(self, video_file_path, output_format):
        """Process a video file into an :class:`OutputContainer` of ``output_format``."""
        if not isinstance(output_format, OutputFormat):
            output_format = OutputFormat.from_extension(output_format)
        video_frame = await self.process_to_video_frame(video_file_path)
        return await self._run_blocking(self.encode, video_frame, output_format)

    async def process(self, video_file_path, output_thumbnail_path):
        """Process a video file and write the thumbnail to ``output_thumbnail_path``.

        The format comes from the output extension (``webp`` or ``png``, any
        case), which is checked before the video is opened.
        """
        output_format = format_from_path(output_thumbnail_path)
        container = await self.process_to_bytes(video_file_path, output_format)
        await self._run_blocking(_write_file, output_thumbnail_path, container.bytes)

    to_bytes = process_to_bytes
    to_file = process


def _write_file(path, data):
    try:
        f = open(path, 'wb')
    except OSError as e:
        raise IoFailed('Could not write {}: {}'.format(path, e)) from e
    try:
        with f:
            f.write(data)
    except OSError as e:
        # A thumbnail is either complete or absent.
        with contextlib.suppress(OSError):
            os.unlink(path)
        raise IoFailed('Could not write {}: {}'.format(path, e)) from e
    logger.info('Wrote thumbnail {}'.format(os.fspath(path)))


async def to_thumbnail(video_file_path, output_thumbnail_path, size=128, quality=80.0):
    """Generate a thumbnail file from a video file with reasonable defaults."""
    thumbnailer = ThumbnailerBuilder().size(size).quality(quality).build()
    await thumbnailer.process(video_file_path, output_thumbnail_path)


async def to_thumbnail_bytes(video_file_path, output_format, size=128, quality=80.0):
    """Generate thumbnail bytes in ``output_format`` with reasonable defaults."""
    thumbnailer = ThumbnailerBuilder().size(size).quality(quality).build()
    return await thumbnailer.process_to_bytes(video_file_path, output_format)


async def to_webp_bytes(video_file_path, size=128, quality=80.0):
    return await to_thumbnail_bytes(video_file_path, OutputFormat.WEBP, size, quality)


async def to_png_bytes(video_file_path, size=128):
    return await to_thumbnail_bytes(video_file_path, OutputFormat.PNG, size)


__all__ = [
    'Thumbnailer',
    'ThumbnailerBuilder',
    'ThumbnailerConfig',
    'build_thumbnailer',
    'to_png_bytes',
    'to_thumbnail',
    'to_thumbnail_bytes',
    'to_webp_bytes',
]
