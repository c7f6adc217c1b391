"""Integration tests for the full post generation pipeline."""

import logging

import pytest

from fakes import fake_dropbox, file_entry, file_link, folder_entry
from foglio.main import PortfolioPublisher, main
from foglio.storage.dropbox_manager import DropboxManager


@pytest.fixture
def photo_dropbox():
    """Fake Dropbox holding one complete pair, one lone small file and a folder."""
    files = [
        file_entry("Sunset.jpg"),
        file_entry("sunset-small.jpg"),
        file_entry("lake-small.png"),
        folder_entry("drafts"),
    ]
    links = {
        "/photo.heyitsalex.net/sunset.jpg": [
            file_link("Sunset.jpg", "https://www.dropbox.com/s/abc/Sunset.jpg?dl=0")
        ],
    }
    return fake_dropbox(
        files,
        links_by_path=links,
        created_url="https://www.dropbox.com/s/def/{name}?dl=0",
    )


def test_run_pipeline(photo_dropbox, post_template, output_dir, token_source, mocker, caplog):
    """Test listing, sharing, pairing and rendering end to end."""
    mocker.patch(
        "foglio.main.DropboxManager",
        side_effect=lambda token, dry_run: DropboxManager(client=photo_dropbox, dry_run=dry_run),
    )
    publisher = PortfolioPublisher(
        template=post_template,
        output_dir=str(output_dir),
        token_source=token_source,
    )

    with caplog.at_level(logging.WARNING, logger="foglio"):
        rendered = publisher.run()

    assert rendered == [("Sunset", str(output_dir / "sunset.md"))]
    assert sorted(p.name for p in output_dir.iterdir()) == ["sunset.md"]

    content = (output_dir / "sunset.md").read_text()
    assert "https://dl.dropboxusercontent.com/s/abc/Sunset.jpg" in content
    assert "https://dl.dropboxusercontent.com/s/def/sunset-small.jpg" in content
    assert "description: sunset" in content

    assert photo_dropbox.sharing_create_shared_link_with_settings.call_count == 2
    skips = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(skips) == 1
    assert "Skipping [Lake]" in skips[0]


def test_main_with_cached_token(photo_dropbox, tmp_path, output_dir, mocker, monkeypatch):
    """Test the CLI using a cached token, without any prompt."""
    token_file = tmp_path / ".foglioToken"
    token_file.write_text("abc123")
    template_file = tmp_path / "post.md"
    template_file.write_text("[[ name ]]: [[ smallSizeLink ]] [[ largeSizeLink ]]\n")

    def no_prompt(_):
        raise AssertionError("should not prompt")

    monkeypatch.setattr("builtins.input", no_prompt)
    dropbox_cls = mocker.patch("foglio.storage.dropbox_manager.dropbox.Dropbox", return_value=photo_dropbox)

    main(
        [
            "--template", str(template_file),
            "--output-directory", str(output_dir),
            "--token-file", str(token_file),
        ]
    )

    dropbox_cls.assert_called_once_with(
        oauth2_access_token="abc123", max_retries_on_error=0, max_retries_on_rate_limit=0
    )
    assert (output_dir / "sunset.md").read_text() == (
        "Sunset: https://dl.dropboxusercontent.com/s/def/sunset-small.jpg "
        "https://dl.dropboxusercontent.com/s/abc/Sunset.jpg\n"
    )
