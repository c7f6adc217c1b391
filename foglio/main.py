"""Main module for Foglio."""

import argparse
import logging
import os
import sys
from typing import Dict, List, Optional, Tuple

from jinja2 import Template
from tabulate import tabulate

from foglio import __version__
from foglio.models import (
    ConfigurationError,
    FoglioError,
    OutputError,
    PortfolioElement,
    ShareLink,
)
from foglio.storage.dropbox_manager import DropboxManager
from foglio.utils.auth import (
    TOKEN_FILE_PATH,
    AccessTokenSource,
    TokenProvider,
    expand_path,
    load_client_secrets,
)
from foglio.utils.file_utils import get_logical_name, is_small_size, normalize_link, title_case
from foglio.utils.template_utils import load_template, render_template

logger = logging.getLogger(__name__)

PHOTO_DIRECTORY = "/photo.heyitsalex.net"
POST_FILE_MODE = 0o644


class PortfolioPublisher:
    """Generates portfolio posts from shared Dropbox photos."""

    def __init__(
        self,
        template: Template,
        output_dir: str,
        token_source: AccessTokenSource,
        directory: str = PHOTO_DIRECTORY,
        dry_run: bool = False,
    ):
        """Initialize the publisher."""
        self.template = template
        self.output_dir = output_dir
        self.token_source = token_source
        self.directory = directory
        self.dry_run = dry_run
        self.storage: Optional[DropboxManager] = None

    def authenticate(self) -> None:
        """Authenticate with the Dropbox API."""
        token = self.token_source.get_access_token()
        self.storage = DropboxManager(token, dry_run=self.dry_run)

    def get_access_links(self) -> List[ShareLink]:
        """List the photo directory and get a shared link for every file."""
        if not self.storage:
            self.authenticate()

        files = self.storage.list_files(self.directory)
        print(f"Found {len(files)} files in {self.directory}")
        return self.storage.resolve_links(files)

    def get_portfolio_elements(self, access_links: List[ShareLink]) -> List[PortfolioElement]:
        """Group shared links into portfolio elements by logical photo name.

        Links whose names normalize to the same title end up in one element.
        Small size files fill the small size link, everything else the large one.
        """
        elements: Dict[str, PortfolioElement] = {}

        for link in access_links:
            title = title_case(get_logical_name(link.name))
            element = elements.setdefault(title, PortfolioElement(title=title))

            if is_small_size(link.name):
                element.small_size_link = normalize_link(link.url)
            else:
                element.large_size_link = normalize_link(link.url)

        return list(elements.values())

    def generate_posts(self, elements: List[PortfolioElement]) -> List[Tuple[str, str]]:
        """Render the template for each complete element into the output directory.

        Elements missing a link are skipped with a warning.

        Args:
            elements: Portfolio elements to render

        Returns:
            (title, output path) for every rendered post

        Raises:
            RenderError: If the template fails to render
            OutputError: If a post cannot be written
        """
        rendered = []

        for element in elements:
            if not element.is_complete:
                logger.warning(
                    "Skipping [%s] because of missing links: small: [%s], large: [%s]",
                    element.title,
                    element.small_size_link,
                    element.large_size_link,
                )
                continue

            data = render_template(self.template, element.to_template_context())
            output_path = os.path.join(self.output_dir, element.post_filename)

            if self.dry_run:
                print(f"[DRY RUN] Would write {output_path}")
            else:
                self.write_post(output_path, data)
                print(f"Rendered template for [{element.post_filename}] to [{output_path}]")

            rendered.append((element.title, output_path))

        return rendered

    def write_post(self, output_path: str, data: str) -> None:
        try:
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(data)
            os.chmod(output_path, POST_FILE_MODE)
        except OSError as e:
            raise OutputError(
                f"Error writing rendered templated to file [{output_path}]: {e}"
            ) from e

    def print_summary(self, rendered: List[Tuple[str, str]]) -> None:
        """Print the rendered posts as a table."""
        if rendered:
            print("\nGenerated posts:")
            print(tabulate(rendered, headers=["Title", "Output Path"], tablefmt="psql"))
            print(f"\nTotal posts: {len(rendered)}")
        else:
            print("No posts generated")

    def run(self) -> List[Tuple[str, str]]:
        """Run the whole pipeline: links, elements, posts."""
        access_links = self.get_access_links()
        elements = self.get_portfolio_elements(access_links)
        rendered = self.generate_posts(elements)
        self.print_summary(rendered)
        return rendered


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="foglio", description="Foglio portfolio post generator"
    )

    parser.add_argument(
        "--template", required=True, help="Path to template file to generate the output."
    )
    parser.add_argument(
        "--output-directory",
        "--outputDirectory",
        dest="output_directory",
        required=True,
        help="Path to output directory for the generated files.",
    )
    parser.add_argument(
        "--directory",
        default=PHOTO_DIRECTORY,
        help=f"Dropbox directory holding the photos (default: {PHOTO_DIRECTORY})",
    )
    parser.add_argument(
        "--token-file",
        default=TOKEN_FILE_PATH,
        help=f"Access token cache file (default: {TOKEN_FILE_PATH})",
    )
    parser.add_argument(
        "--client-secrets",
        default="client_secret.json",
        help="OAuth client secrets file, read only when authorizing",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Run without creating links or writing files"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser.parse_args(argv)


def build_publisher(args) -> PortfolioPublisher:
    """Validate the configuration and create the publisher."""
    template = load_template(expand_path(args.template))

    output_dir = expand_path(args.output_directory)
    if not os.path.isdir(output_dir):
        raise ConfigurationError(f"Output directory does not exist: {output_dir}")

    token_provider = TokenProvider(
        token_path=args.token_file,
        secrets_loader=lambda: load_client_secrets(args.client_secrets),
    )

    return PortfolioPublisher(
        template=template,
        output_dir=output_dir,
        token_source=token_provider,
        directory=args.directory,
        dry_run=args.dry_run,
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the Foglio CLI."""
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        publisher = build_publisher(args)
        publisher.run()
    except FoglioError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
