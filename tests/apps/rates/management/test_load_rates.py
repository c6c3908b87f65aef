import pytest
from io import StringIO
from unittest.mock import Mock

from django.core.management import call_command
from django.core.management.base import CommandError


@pytest.fixture
def feed_file(tmp_path, ecb_document):
    path = tmp_path / "eurofxref-hist-90d.xml"
    path.write_bytes(ecb_document)
    return path


def run(*args):
    out = StringIO()
    call_command("load_rates", *args, stdout=out)
    return out.getvalue()


class TestLoadRatesCommand:
    """Tests for the load_rates management command."""

    def test_load_from_file(self, feed_file):
        output = run("--feed", "ecb_hist90", "--file", str(feed_file))

        assert "Loaded 2 days (2 new)" in output

    def test_resolve_derived_pair(self, feed_file):
        """
        Test that a resolved derived pair prints its rate and both legs.
        """
        output = run("--file", str(feed_file), "--from", "USD", "--to", "JPY", "--date", "2024-05-21")

        assert "USD/JPY on 2024-05-21: 118.181818181818" in output
        assert "via USD/EUR: 0.9090909090909091" in output
        assert "via EUR/JPY: 130.0" in output

    def test_unknown_rate(self, feed_file):
        output = run("--file", str(feed_file), "--from", "EUR", "--to", "CHF")

        assert "No rate known for EUR/CHF" in output

    def test_impossible_conversion(self, feed_file):
        with pytest.raises(CommandError):
            run("--file", str(feed_file), "--from", "USD", "--to", "CHF")

    def test_unknown_feed(self, feed_file):
        with pytest.raises(CommandError):
            run("--feed", "nope", "--file", str(feed_file))

    def test_invalid_date(self, feed_file):
        with pytest.raises(CommandError):
            run("--file", str(feed_file), "--from", "USD", "--to", "JPY", "--date", "21.05.2024")

    def test_pair_needs_both_currencies(self, feed_file):
        with pytest.raises(CommandError):
            run("--file", str(feed_file), "--from", "USD")

    def test_missing_file(self, tmp_path):
        with pytest.raises(CommandError):
            run("--file", str(tmp_path / "missing.xml"))

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "broken.xml"
        path.write_bytes(b"<Envelope><Cube>")

        with pytest.raises(CommandError):
            run("--file", str(path))

    def test_download(self, ecb_document, mocker):
        """
        Test the download path with requests mocked out.
        """
        response = Mock()
        response.content = ecb_document
        response.raise_for_status.return_value = None
        get = mocker.patch("requests.get", return_value=response)

        output = run("--feed", "ecb_current")

        assert "Loaded 2 days" in output
        assert get.call_args[0][0].endswith("/eurofxref-daily.xml")

    def test_download_failure(self, mocker):
        import requests

        mocker.patch("requests.get", side_effect=requests.exceptions.Timeout())

        with pytest.raises(CommandError):
            run("--feed", "ecb_current")
