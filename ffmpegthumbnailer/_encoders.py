from collections import namedtuple
import enum
import io
import logging
import os

from PIL import Image, features

from ._errors import EMPTY_EXTENSION, EncodeFailed, UnsupportedExtension


logger = logging.getLogger(__name__)


class OutputFormat(enum.Enum):
    WEBP = 'webp'
    PNG = 'png'

    @classmethod
    def from_extension(cls, extension):
        """Look up a format by file extension, ignoring case and a leading dot."""
        if not extension:
            raise UnsupportedExtension(EMPTY_EXTENSION)
        try:
            return cls(extension.lstrip('.').lower())
        except ValueError:
            raise UnsupportedExtension(extension.lstrip('.'))


class OutputContainer(
    namedtuple(
        'OutputContainer', ['width', 'height', 'source_width', 'source_height', 'bytes']
    )
):
    """An encoded thumbnail along with the dimensions of the frame it came from."""

    __slots__ = ()

    @classmethod
    def from_frame(cls, video_frame, data):
        return cls(
            width=video_frame.width,
            height=video_frame.height,
            source_width=video_frame.source_width,
            source_height=video_frame.source_height,
            bytes=data,
        )


def format_from_path(path):
    """Infer the output format from the extension of ``path``.

    Raises:
        :class:`UnsupportedExtension`: carrying the extension without its dot,
            or ``EMPTY_EXTENSION`` when ``path`` has none.
    """
    _, extension = os.path.splitext(os.fspath(path))
    return OutputFormat.from_extension(extension)


def available_formats():
    """Return the output formats the installed Pillow can encode."""
    formats = [OutputFormat.PNG]
    if features.check('webp'):
        formats.insert(0, OutputFormat.WEBP)
    return formats


def _to_image(video_frame):
    if video_frame.is_empty():
        raise EncodeFailed('Cannot encode an empty frame')
    expected = video_frame.width * video_frame.height * 3
    if len(video_frame.data) != expected:
        raise EncodeFailed(
            'Frame buffer holds {} bytes, expected {}'.format(len(video_frame.data), expected)
        )
    return Image.frombytes(
        'RGB', (video_frame.width, video_frame.height), bytes(video_frame.data)
    )


def _save(image, **params):
    buf = io.BytesIO()
    try:
        image.save(buf, **params)
    except (KeyError, OSError, ValueError) as e:
        raise EncodeFailed('{} encoding failed: {}'.format(params['format'], e))
    return buf.getvalue()


def encode_webp(video_frame, quality):
    """Encode ``video_frame`` as lossy WebP at ``quality`` (0.0 to 100.0)."""
    if OutputFormat.WEBP not in available_formats():
        raise EncodeFailed('WebP support is not available in this Pillow build')
    image = _to_image(video_frame)
    data = _save(image, format='WEBP', quality=float(quality), lossless=False)
    return OutputContainer.from_frame(video_frame, data)


def encode_png(video_frame):
    """Encode ``video_frame`` as an 8-bit RGB PNG."""
    image = _to_image(video_frame)
    data = _save(image, format='PNG')
    return OutputContainer.from_frame(video_frame, data)


def encode(video_frame, output_format, quality):
    """Encode ``video_frame`` in ``output_format``; ``quality`` is ignored for PNG."""
    if not isinstance(output_format, OutputFormat):
        output_format = OutputFormat.from_extension(output_format)
    logger.debug(
        'Encoding {}x{} frame as {}'.format(
            video_frame.width, video_frame.height, output_format.value
        )
    )
    if output_format is OutputFormat.WEBP:
        return encode_webp(video_frame, quality)
    return encode_png(video_frame)


__all__ = [
    'OutputContainer',
    'OutputFormat',
    'available_formats',
    'encode',
    'format_from_path',
]
