from __future__ import annotations

from unittest.mock import patch

from recordsheet.services.progress import RowProgress


def test_progress_disabled_without_tty():
    with patch("recordsheet.services.progress.is_tty_enabled", return_value=False):
        with RowProgress(3) as progress:
            progress.advance()
            progress.advance(2)
    assert progress.pbar is None
    assert progress.current_row == 3


def test_progress_enabled_with_tty():
    with patch("recordsheet.services.progress.is_tty_enabled", return_value=True):
        with patch("recordsheet.services.progress.tqdm") as fake_tqdm:
            with RowProgress(2, description="Rows") as progress:
                progress.advance()
    fake_tqdm.assert_called_once()
    assert fake_tqdm.call_args.kwargs["desc"] == "Rows"
    fake_tqdm.return_value.update.assert_called_once_with(1)
    fake_tqdm.return_value.close.assert_called_once()
