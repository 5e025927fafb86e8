"""Command-line interface for running the handler locally."""

import sys
import json
import base64
import argparse
from typing import Any, Dict, List, Optional

from . import __version__
from .core.config import HandlerConfig
from .core.factories import HandlerFactory
from .core.logging_config import setup_logger


def build_event(args: argparse.Namespace) -> Dict[str, Any]:
    """Build an API Gateway proxy event from CLI arguments."""
    query = {
        name: value
        for name, value in (
            ("resize", args.resize),
            ("crop", args.crop),
            ("format", args.format),
            ("quality", args.quality),
        )
        if value is not None
    }
    return {
        "pathParameters": {"proxy": args.key},
        "queryStringParameters": query or None,
    }


def render(args: argparse.Namespace) -> int:
    """Run one request through the handler and write the result."""
    if args.debug:
        setup_logger("media-transform", level="DEBUG")

    config = HandlerConfig.from_env()
    if args.bucket:
        config = config.model_copy(update={"source_bucket": args.bucket})

    handler = HandlerFactory.create_handler(config=config)
    response = handler.handle(build_event(args))

    if response["statusCode"] != 200:
        print(f"Error {response['statusCode']}: {response['body']}", file=sys.stderr)
        return 1

    body = base64.b64decode(response["body"])
    with open(args.output, "wb") as output_file:
        output_file.write(body)

    print(
        json.dumps(
            {
                "output": args.output,
                "contentType": response["headers"]["Content-Type"],
                "bytes": len(body),
            }
        )
    )
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point for the media-transform command-line interface.

    Commands:
        render: fetch an object through the handler and save the result
        version: print version information
    """
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="media-transform",
        description="Media Transform - on-the-fly S3 image resizing and conversion",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Resize to 300px wide WebP
  media-transform render --bucket my-media --key photos/cat.jpg \\
                         --resize 300x --output cat.webp

  # Crop a region then fit it into a 128x128 JPEG
  media-transform render --key photos/cat.jpg --crop 0,0,400,400 \\
                         --resize 128x128 --format jpg --output thumb.jpg
        """,
    )

    subparsers: argparse._SubParsersAction = parser.add_subparsers(
        dest="command", help="Available commands"
    )

    render_parser: argparse.ArgumentParser = subparsers.add_parser(
        "render", help="Fetch and transform one object"
    )
    render_parser.add_argument("--key", required=True, help="Object key")
    render_parser.add_argument(
        "--bucket", default=None, help="Source bucket (defaults to SOURCE_BUCKET)"
    )
    render_parser.add_argument("--resize", default=None, help="<W>x<H>, W or H optional")
    render_parser.add_argument("--crop", default=None, help="left,top,width,height")
    render_parser.add_argument(
        "--format", default=None, help="Output format: jpeg, jpg, png, webp, avif"
    )
    render_parser.add_argument("--quality", default=None, help="Quality for lossy formats")
    render_parser.add_argument("--output", required=True, help="File to write")
    render_parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )

    subparsers.add_parser("version", help="Show version information")

    args: argparse.Namespace = parser.parse_args(argv)

    if args.command == "render":
        sys.exit(render(args))

    elif args.command == "version":
        print("Media Transform CLI")
        print(f"Version {__version__}")
        print("On-the-fly S3 image resizing and format conversion")
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
