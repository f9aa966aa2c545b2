import numpy as np


STRIP_COLOR = 0x1c
HOLE_COLOR = 0xdc
HOLE_EDGE_COLOR = 0x7c


def _strip_width(frame_width):
    if frame_width < 96:
        return 4
    if frame_width < 384:
        return 8
    return 16


def _film_hole_tile(edge):
    """Build one ``edge x edge`` RGB tile of the strip: a light sprocket hole on a dark band."""
    tile = np.full((edge, edge, 3), STRIP_COLOR, dtype=np.uint8)
    start = edge // 4
    stop = edge - start
    tile[start:stop, start:stop] = HOLE_COLOR
    if edge >= 8:
        # Soften the hole corners.
        for row in (start, stop - 1):
            for col in (start, stop - 1):
                tile[row, col] = HOLE_EDGE_COLOR
    return tile


def film_strip_filter(video_frame):
    """Overlay a film strip on the left and right edges of ``video_frame``.

    The frame is modified in place and keeps its size; only the strip
    columns on each side are written.  Frames too narrow to carry two strips
    are left as they are.
    """
    if video_frame.is_empty():
        return
    edge = _strip_width(video_frame.width)
    if video_frame.width < 2 * edge + 1:
        return

    pixels = video_frame.to_array()
    tile = _film_hole_tile(edge)
    repeats = -(-video_frame.height // edge)
    strip = np.tile(tile, (repeats, 1, 1))[: video_frame.height]
    pixels[:, :edge] = strip
    pixels[:, -edge:] = strip[:, ::-1]


__all__ = ['film_strip_filter']
