"""Builders for Dropbox SDK objects used across tests."""

from unittest.mock import MagicMock

import dropbox
from dropbox.files import DeletedMetadata, FileMetadata, FolderMetadata, ListFolderResult
from dropbox.sharing import FileLinkMetadata, FolderLinkMetadata, ListSharedLinksResult

PHOTO_DIR = "/photo.heyitsalex.net"


def file_entry(name: str, directory: str = PHOTO_DIR) -> FileMetadata:
    return FileMetadata(name=name, path_lower=f"{directory}/{name}".lower())


def folder_entry(name: str, directory: str = PHOTO_DIR) -> FolderMetadata:
    return FolderMetadata(name=name, path_lower=f"{directory}/{name}".lower())


def deleted_entry(name: str, directory: str = PHOTO_DIR) -> DeletedMetadata:
    return DeletedMetadata(name=name, path_lower=f"{directory}/{name}".lower())


def _shared_link(link_type, name: str, url: str):
    # The SDK requires link_permissions, timestamps and more on real link
    # structs; only name and url are read.
    link = MagicMock(spec=link_type)
    link.name = name
    link.url = url
    return link


def file_link(name: str, url: str) -> FileLinkMetadata:
    return _shared_link(FileLinkMetadata, name, url)


def folder_link(name: str, url: str) -> FolderLinkMetadata:
    return _shared_link(FolderLinkMetadata, name, url)


def folder_page(entries, cursor: str = "cursor", has_more: bool = False) -> ListFolderResult:
    return ListFolderResult(entries=entries, cursor=cursor, has_more=has_more)


def links_page(links, cursor=None, has_more: bool = False) -> ListSharedLinksResult:
    page = MagicMock(spec=ListSharedLinksResult)
    page.links = list(links)
    page.has_more = has_more
    page.cursor = cursor
    return page


def fake_dropbox(files, links_by_path=None, created_url="https://www.dropbox.com/s/new/{name}?dl=0"):
    """Mock Dropbox client serving one listing page and per-path link lists.

    Paths missing from ``links_by_path`` have no links; creating one returns
    a link built from ``created_url``.
    """
    links_by_path = links_by_path or {}
    dbx = MagicMock(spec=dropbox.Dropbox)
    dbx.files_list_folder.return_value = folder_page(files)

    def list_links(path=None, cursor=None):
        return links_page(links_by_path.get(path, []))

    def create_link(path):
        name = path.rsplit("/", 1)[-1]
        return file_link(name, created_url.format(name=name))

    dbx.sharing_list_shared_links.side_effect = list_links
    dbx.sharing_create_shared_link_with_settings.side_effect = create_link
    return dbx
