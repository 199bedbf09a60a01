"""
Sitemap Builder - CLI

Command-line interface for generating sitemaps and sitemap indexes.
"""

import argparse
import asyncio
import sys
from typing import List, Union, Dict, Any

import yaml

from sitemap_builder.config import get_config
from sitemap_builder.errors import SitemapError
from sitemap_builder.logging_config import setup_logging, get_logger
from sitemap_builder.sitemap.document import Sitemap
from sitemap_builder.sitemap.index import SitemapIndex
from sitemap_builder.sitemap.reader import SitemapReader


def load_urls(args) -> List[Union[str, Dict[str, Any]]]:
    """
    URLs from ``--urls-file`` (one per line, or a YAML list) or from the
    ``urls`` section of the config file.
    """
    if getattr(args, "urls_file", None):
        with open(args.urls_file, "r", encoding="utf-8") as f:
            content = f.read()
        if args.urls_file.endswith((".yaml", ".yml")):
            return yaml.safe_load(content) or []
        return [line.strip() for line in content.splitlines() if line.strip()]
    return list(get_config(args.config).urls)


def render(args):
    """Render a single sitemap to stdout or a file."""
    config = get_config(args.config)
    setup_logging(level=args.log_level or config.log_level, json_format=args.json_logs)
    logger = get_logger("cli")

    sitemap = Sitemap(load_urls(args), hostname=args.hostname or config.hostname)
    xml = sitemap.render()

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(xml)
        logger.info("Sitemap written", extra={"path": args.output, "entries": len(sitemap)})
    else:
        print(xml)


def _build_index(args, urls):
    config = get_config(args.config)
    logger = get_logger("cli")

    builder = SitemapIndex(
        urls,
        args.target_folder or config.target_folder,
        hostname=args.hostname or config.hostname,
        sitemap_name=args.name or config.sitemap_name,
        sitemap_size=args.size or config.sitemap_size,
    )
    result = asyncio.run(builder.build())

    print("\n" + "=" * 50)
    print("SITEMAP INDEX")
    print("=" * 50)
    print(f"URLs:          {len(builder.urls)}")
    print(f"Sitemap files: {len(result.sitemap_files)}")
    for path in result.sitemap_files:
        print(f"  - {path}")
    print(f"Index file:    {result.index_file}")
    print("=" * 50)

    logger.info("Sitemap index complete", extra={"chunks": len(result.sitemap_files)})


def index(args):
    """Build sharded sitemap files plus an index."""
    config = get_config(args.config)
    setup_logging(level=args.log_level or config.log_level, json_format=args.json_logs)
    _build_index(args, load_urls(args))


def split(args):
    """Split an existing sitemap file into an index of smaller sitemaps."""
    config = get_config(args.config)
    setup_logging(level=args.log_level or config.log_level, json_format=args.json_logs)

    entries = SitemapReader().parse_file(args.sitemap)
    _build_index(args, entries)


def serve(args):
    """Serve the configured sitemap over HTTP."""
    import uvicorn
    from sitemap_builder.api.server import app

    uvicorn.run(app, host=args.host, port=args.port)


def _add_common(parser):
    parser.add_argument("--config", help="Path to YAML config (default: config/sitemap.yaml)")
    parser.add_argument("--hostname", help="Base URL prepended to relative locations")
    parser.add_argument("--log-level", dest="log_level", help="DEBUG, INFO, WARNING, ERROR")
    parser.add_argument("--json-logs", dest="json_logs", action="store_true", help="Log as JSON lines")


def _add_index_options(parser):
    parser.add_argument("--target-folder", dest="target_folder", help="Existing output folder")
    parser.add_argument("--name", help="Sitemap file name prefix (default: sitemap)")
    parser.add_argument("--size", type=int, help="Maximum URLs per sitemap file")


def main():
    """CLI main entry point."""
    parser = argparse.ArgumentParser(
        description="Sitemap Builder CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # render command
    render_parser = subparsers.add_parser(
        "render",
        help="Render a single sitemap"
    )
    _add_common(render_parser)
    render_parser.add_argument("--urls-file", dest="urls_file", help="Text file (one URL per line) or YAML list")
    render_parser.add_argument("--output", "-o", help="Write to file instead of stdout")
    render_parser.set_defaults(func=render)

    # index command
    index_parser = subparsers.add_parser(
        "index",
        help="Write sharded sitemaps and a sitemap index"
    )
    _add_common(index_parser)
    _add_index_options(index_parser)
    index_parser.add_argument("--urls-file", dest="urls_file", help="Text file (one URL per line) or YAML list")
    index_parser.set_defaults(func=index)

    # split command
    split_parser = subparsers.add_parser(
        "split",
        help="Split an existing sitemap file into a sitemap index"
    )
    _add_common(split_parser)
    _add_index_options(split_parser)
    split_parser.add_argument("sitemap", help="Path to an existing urlset XML file")
    split_parser.set_defaults(func=split)

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the configured sitemap over HTTP"
    )
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.set_defaults(func=serve)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except SitemapError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
