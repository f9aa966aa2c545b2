#!/usr/bin/env python
import argparse
import asyncio
import ffmpegthumbnailer
import logging
import sys


parser = argparse.ArgumentParser(description='Generate a video thumbnail')
parser.add_argument('in_filename', help='Input filename')
parser.add_argument('out_filename', help='Output filename (.webp or .png)')
parser.add_argument(
    '--size', type=int, default=128, help='Length of the longest thumbnail edge')
parser.add_argument(
    '--seek', type=float, default=0.1,
    help='Fraction of the duration to seek to when there is no cover art')
parser.add_argument(
    '--quality', type=float, default=80.0, help='WebP quality (0 to 100)')
parser.add_argument(
    '--stretch', action='store_true', help='Do not keep the aspect ratio')
parser.add_argument(
    '--no-film-strip', action='store_true', help='Leave out the film strip border')
parser.add_argument(
    '--ignore-cover', action='store_true', help='Use a video frame even if there is cover art')
parser.add_argument('-v', '--verbose', action='store_true', help='Log each step')


def make_thumbnail(args):
    thumbnailer = ffmpegthumbnailer.build_thumbnailer(
        size=args.size,
        seek_percentage=args.seek,
        quality=args.quality,
        maintain_aspect_ratio=not args.stretch,
        with_film_strip=not args.no_film_strip,
        prefer_embedded_metadata=not args.ignore_cover,
    )
    asyncio.run(thumbnailer.process(args.in_filename, args.out_filename))


if __name__ == '__main__':
    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        make_thumbnail(args)
    except ffmpegthumbnailer.DecoderError as e:
        print(e, file=sys.stderr)
        sys.exit(1)
    except ffmpegthumbnailer.ThumbnailerError as e:
        print(e, file=sys.stderr)
        sys.exit(2)
