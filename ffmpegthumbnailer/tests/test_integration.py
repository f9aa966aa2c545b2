"""End-to-end runs against the real ffmpeg and ffprobe executables."""
from PIL import Image
import asyncio
import ffmpegthumbnailer
import numpy as np
import os
import pytest
import shutil
import subprocess


pytestmark = pytest.mark.skipif(
    shutil.which('ffmpeg') is None or shutil.which('ffprobe') is None,
    reason='requires ffmpeg and ffprobe',
)


@pytest.fixture(scope='module')
def sample_video(tmp_path_factory):
    path = str(tmp_path_factory.mktemp('sample_data') / 'in1.mp4')
    subprocess.check_call(
        [
            'ffmpeg',
            '-hide_banner',
            '-loglevel',
            'error',
            '-nostdin',
            '-f',
            'lavfi',
            '-i',
            'testsrc=duration=3:size=320x240:rate=10',
            '-c:v',
            'mpeg4',
            '-pix_fmt',
            'yuv420p',
            '-y',
            path,
        ]
    )
    return path


def _extract(path, **options):
    return ffmpegthumbnailer.build_thumbnailer(**options).extract_frame(path)


def test__process_to_video_frame(sample_video):
    thumbnailer = ffmpegthumbnailer.build_thumbnailer()
    frame = asyncio.run(thumbnailer.process_to_video_frame(sample_video))
    assert (frame.width, frame.height) == (128, 96)
    assert (frame.source_width, frame.source_height) == (320, 240)
    assert len(frame.data) == 128 * 96 * 3


def test__original_size(sample_video):
    frame = _extract(sample_video, size=0, with_film_strip=False)
    assert (frame.width, frame.height) == (320, 240)


@pytest.mark.parametrize('seek_percentage', [0.0, 0.5, 1.0])
def test__seek_boundaries(sample_video, seek_percentage):
    frame = _extract(sample_video, seek_percentage=seek_percentage)
    assert (frame.width, frame.height) == (128, 96)


def test__film_strip_toggle(sample_video):
    plain = _extract(sample_video, with_film_strip=False).to_array()
    striped = _extract(sample_video, with_film_strip=True).to_array()
    assert np.array_equal(plain[:, 8:-8], striped[:, 8:-8])
    assert not np.array_equal(plain[:, :8], striped[:, :8])


def test__idempotent(sample_video):
    thumbnailer = ffmpegthumbnailer.build_thumbnailer()
    first = asyncio.run(
        thumbnailer.process_to_bytes(sample_video, ffmpegthumbnailer.OutputFormat.PNG)
    )
    second = asyncio.run(
        thumbnailer.process_to_bytes(sample_video, ffmpegthumbnailer.OutputFormat.PNG)
    )
    assert first.bytes == second.bytes


def test__to_file(sample_video, tmp_path):
    out_path = os.path.join(str(tmp_path), 'out1.png')
    asyncio.run(ffmpegthumbnailer.to_thumbnail(sample_video, out_path, size=160))
    with Image.open(out_path) as image:
        assert image.format == 'PNG'
        assert image.size == (160, 120)


def test__open_failed(tmp_path):
    bogus = tmp_path / 'bogus.mp4'
    bogus.write_bytes(b'this is not a video')
    with pytest.raises(ffmpegthumbnailer.OpenFailed) as excinfo:
        _extract(str(bogus))
    assert excinfo.value.stderr


def test__missing_file(tmp_path):
    with pytest.raises(ffmpegthumbnailer.OpenFailed):
        _extract(str(tmp_path / 'missing.mp4'))
