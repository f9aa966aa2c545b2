from setuptools import setup
from textwrap import dedent

version = '0.2.0'

long_description = dedent(
    '''\
    ffmpeg-thumbnailer: video thumbnails with FFmpeg
    ================================================

    Extracts a representative frame from a video file (embedded cover art,
    or a frame a fraction of the way in), scales it, optionally adds a film
    strip border, and encodes it to WebP or PNG.
'''
)


file_formats = [
    'avi',
    'mkv',
    'mov',
    'mp4',
    'png',
    'webm',
    'webp',
]
file_formats += ['.{}'.format(x) for x in file_formats]

misc_keywords = [
    'asyncio',
    'cover art',
    'FFmpeg',
    'ffmpeg',
    'ffprobe',
    'film strip',
    'frame',
    'preview',
    'thumbnail',
    'thumbnailer',
    'video',
]

keywords = misc_keywords + file_formats

setup(
    name='ffmpeg-thumbnailer',
    packages=['ffmpegthumbnailer'],
    tests_require=['pytest', 'pytest-mock'],
    version=version,
    description='Video thumbnails with FFmpeg, encoded to WebP or PNG',
    keywords=keywords,
    long_description=long_description,
    python_requires='>=3.7',
    install_requires=['numpy', 'Pillow'],
    extras_require={
        'dev': [
            'pytest',
            'pytest-mock',
        ]
    },
    classifiers=[
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Multimedia :: Video',
    ],
)
