"""Dropbox operations for Foglio."""

import logging
from typing import List, Optional

import dropbox
from dropbox.exceptions import DropboxException
from dropbox.files import FileMetadata
from dropbox.sharing import FileLinkMetadata
from requests.exceptions import RequestException

from foglio.models import ApiError, RemoteFile, ShareLink

logger = logging.getLogger(__name__)

# SDK failures and transport failures the SDK lets through.
DROPBOX_ERRORS = (DropboxException, RequestException)


class DropboxManager:
    """Manages Dropbox listing and sharing operations for Foglio."""

    def __init__(
        self,
        access_token: Optional[str] = None,
        dry_run: bool = False,
        client: Optional[dropbox.Dropbox] = None,
    ):
        """Initialize Dropbox manager.

        Args:
            access_token: OAuth access token for the Dropbox account
            dry_run: If True, report missing shared links without creating them
            client: Preconfigured Dropbox client, used instead of the token
        """
        if client is None:
            if not access_token:
                raise ValueError("Either an access token or a Dropbox client is required")
            # A failed call ends the run, so the SDK must not retry.
            client = dropbox.Dropbox(
                oauth2_access_token=access_token,
                max_retries_on_error=0,
                max_retries_on_rate_limit=0,
            )
        self.dbx = client
        self.dry_run = dry_run

    def list_files(self, directory: str) -> List[RemoteFile]:
        """List all plain files in a remote directory.

        Follows the listing cursor until every page has been read. Folders and
        deleted entries are skipped.

        Args:
            directory: Remote directory path, e.g. /photos

        Returns:
            Files in listing order

        Raises:
            ApiError: If any page of the listing fails
        """
        try:
            result = self.dbx.files_list_folder(directory)
            entries = list(result.entries)
            while result.has_more:
                result = self.dbx.files_list_folder_continue(result.cursor)
                entries.extend(result.entries)
        except DROPBOX_ERRORS as e:
            raise ApiError(f"Error listing directory [{directory}]: {e}") from e

        files = [
            RemoteFile(name=entry.name, path_lower=entry.path_lower)
            for entry in entries
            if isinstance(entry, FileMetadata)
        ]
        logger.debug("Listed %d entries, %d files in %s", len(entries), len(files), directory)
        return files

    def resolve_links(self, files: List[RemoteFile]) -> List[ShareLink]:
        """Get a shared link for every file, creating the missing ones.

        A link is only created when Dropbox reports no link at all for the
        file. Links to a shared parent folder count as existing links, even
        though they contribute nothing. A file with several existing file
        links contributes all of them.

        Args:
            files: Files to share

        Returns:
            Shared links of all files, in file order

        Raises:
            ApiError: If listing or creating links fails for any file
        """
        shared_links: List[ShareLink] = []
        for remote_file in files:
            links = self.get_existing_links(remote_file)
            if links is None:
                links = self.create_link(remote_file)
            shared_links.extend(links)
        return shared_links

    def get_existing_links(self, remote_file: RemoteFile) -> Optional[List[ShareLink]]:
        """Get all existing file links for a remote file.

        Returns None when the file has no shared link of any kind.
        """
        links: List[ShareLink] = []
        try:
            result = self.dbx.sharing_list_shared_links(path=remote_file.path_lower)
            if not result.links:
                return None
            links.extend(self._file_links(result.links))
            while result.has_more:
                result = self.dbx.sharing_list_shared_links(
                    path=remote_file.path_lower, cursor=result.cursor
                )
                links.extend(self._file_links(result.links))
        except DROPBOX_ERRORS as e:
            raise ApiError(f"Error getting shared link for [{remote_file.name}]: {e}") from e
        return links

    def create_link(self, remote_file: RemoteFile) -> List[ShareLink]:
        """Create a public link for a remote file."""
        if self.dry_run:
            print(f"[DRY RUN] Would create shared link for {remote_file.name}")
            return []

        print(f"Creating shared link for file: {remote_file.name}")
        try:
            link = self.dbx.sharing_create_shared_link_with_settings(remote_file.path_lower)
        except DROPBOX_ERRORS as e:
            raise ApiError(f"Error creating shared link for [{remote_file.name}]: {e}") from e
        return self._file_links([link])

    @staticmethod
    def _file_links(links) -> List[ShareLink]:
        return [
            ShareLink(name=link.name, url=link.url)
            for link in links
            if isinstance(link, FileLinkMetadata)
        ]
