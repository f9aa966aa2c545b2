from collections import namedtuple

import numpy as np

from ._utils import round_half_up


class ThumbnailSize(object):
    """Base class of the two ways to ask for a thumbnail size."""

    __slots__ = ()


class Size(namedtuple('Size', ['edge']), ThumbnailSize):
    """A single edge length; the aspect-ratio policy decides the other edge."""

    __slots__ = ()


class Dimensions(namedtuple('Dimensions', ['width', 'height']), ThumbnailSize):
    """An explicit width and height."""

    __slots__ = ()


class VideoFrame(object):
    """A decoded, possibly scaled, RGB24 image.

    ``data`` holds ``width * height * 3`` bytes with no row padding.
    ``source_width`` and ``source_height`` keep the dimensions the frame was
    decoded at, before any scaling.
    """

    def __init__(self, width=0, height=0, source_width=0, source_height=0, data=None):
        self.width = width
        self.height = height
        self.source_width = source_width
        self.source_height = source_height
        self.data = bytearray() if data is None else bytearray(data)

    def __repr__(self):
        return 'VideoFrame({}x{}, source={}x{})'.format(
            self.width, self.height, self.source_width, self.source_height
        )

    def is_empty(self):
        return self.width == 0 or self.height == 0

    def to_array(self):
        """Return a writable ``(height, width, 3)`` uint8 view of ``data``.

        Writing to the array writes through to the frame.
        """
        if len(self.data) != self.width * self.height * 3:
            raise ValueError(
                'Frame buffer holds {} bytes, expected {}x{}x3'.format(
                    len(self.data), self.width, self.height
                )
            )
        return np.frombuffer(self.data, np.uint8).reshape([self.height, self.width, 3])


def _fit(source_width, source_height, max_width, max_height):
    scale = min(float(max_width) / source_width, float(max_height) / source_height)
    width = max(1, round_half_up(source_width * scale))
    height = max(1, round_half_up(source_height * scale))
    return min(width, max_width), min(height, max_height)


def calculate_dimensions(source_width, source_height, size, maintain_aspect_ratio):
    """Work out the output size of a frame decoded at the given dimensions.

    Args:
        size: a :class:`Size`, a :class:`Dimensions`, or ``None`` to keep the
            source dimensions.  An edge of ``0`` also keeps them.
        maintain_aspect_ratio: if True, ``Size(s)`` binds the longer source
            edge to ``s`` and ``Dimensions(w, h)`` fits the frame inside
            ``w x h``; if False the frame is stretched to ``s x s`` or
            ``w x h``.

    Returns: (width, height) tuple.
    """
    if source_width <= 0 or source_height <= 0:
        raise ValueError(
            'Invalid source dimensions {}x{}'.format(source_width, source_height)
        )
    if size is None:
        return source_width, source_height

    if isinstance(size, Size):
        if size.edge <= 0:
            return source_width, source_height
        if not maintain_aspect_ratio:
            return size.edge, size.edge
        if source_width >= source_height:
            return size.edge, max(1, round_half_up(size.edge * source_height / float(source_width)))
        return max(1, round_half_up(size.edge * source_width / float(source_height))), size.edge

    if isinstance(size, Dimensions):
        if size.width <= 0 or size.height <= 0:
            return source_width, source_height
        if not maintain_aspect_ratio:
            return size.width, size.height
        return _fit(source_width, source_height, size.width, size.height)

    raise TypeError('Expected Size or Dimensions; got {!r}'.format(size))


__all__ = [
    'Dimensions',
    'Size',
    'ThumbnailSize',
    'VideoFrame',
    'calculate_dimensions',
]
