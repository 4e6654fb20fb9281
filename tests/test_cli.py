"""Unit tests for the bulk import CLI"""
import pytest
from unittest.mock import AsyncMock, patch

import httpx

from product_admin.cli import EXIT_FAILED, EXIT_OK, EXIT_ROW_ERRORS, main, parse_args, run_import
from product_admin.clients.admin_api_client import AdminApiClient
from product_admin.services.notifier import Notifier


def preview_body(is_error=False):
    return [{
        "productTitle": "Basic Tee",
        "category": "Men > Tops > Shirts",
        "productDetails": [{
            "productTitle": "Basic Tee",
            "category": "Men > Tops > Shirts",
            "color": "Red",
            "size": "M",
            "price": 19.99,
            "quantity": 10,
            "imageUrls": ["https://cdn/red.jpg"],
            "isError": is_error,
            "errorMessage": "Color not found" if is_error else None,
        }],
    }]


def api_for(preview, calls):
    def handler(request):
        calls.append(request.url.path)
        if request.url.path.endswith("/zip-preview"):
            return httpx.Response(200, json=preview)
        if request.url.path.endswith("/zip-save"):
            return httpx.Response(200, json={"message": "saved"})
        return httpx.Response(404, json={"message": "not found"})

    return AdminApiClient(base_url="http://api.test/api", transport=httpx.MockTransport(handler))


class TestCli:
    """Test argument parsing and the import run"""

    @pytest.fixture
    def files(self, tmp_path, sample_csv):
        csv_path = tmp_path / "products.csv"
        csv_path.write_text(sample_csv, encoding="utf-8")
        zip_path = tmp_path / "images.zip"
        zip_path.write_bytes(b"PK\x03\x04")
        return csv_path, zip_path

    def test_parse_args(self):
        args = parse_args(["p.csv", "--zip", "a.zip", "--zip", "b.zip", "--dry-run"])
        assert str(args.csv) == "p.csv"
        assert [str(z) for z in args.zips] == ["a.zip", "b.zip"]
        assert args.dry_run is True

    def test_zip_is_required(self):
        with pytest.raises(SystemExit):
            parse_args(["p.csv"])

    @pytest.mark.asyncio
    async def test_run_import_saves(self, files):
        calls = []
        csv_path, zip_path = files

        code = await run_import(csv_path, [zip_path], api=api_for(preview_body(), calls))

        assert code == EXIT_OK
        assert calls == ["/api/products/import/zip-preview", "/api/products/import/zip-save"]

    @pytest.mark.asyncio
    async def test_dry_run_skips_save(self, files):
        calls = []
        csv_path, zip_path = files

        code = await run_import(csv_path, [zip_path], dry_run=True, api=api_for(preview_body(), calls))

        assert code == EXIT_OK
        assert calls == ["/api/products/import/zip-preview"]

    @pytest.mark.asyncio
    async def test_row_errors(self, files, capsys):
        calls = []
        csv_path, zip_path = files

        code = await run_import(csv_path, [zip_path], api=api_for(preview_body(is_error=True), calls))

        assert code == EXIT_ROW_ERRORS
        assert "Color not found" in capsys.readouterr().err
        assert calls == ["/api/products/import/zip-preview"]

    @pytest.mark.asyncio
    async def test_invalid_csv(self, tmp_path, files):
        bad_csv = tmp_path / "bad.csv"
        bad_csv.write_text("Title\nTee\n", encoding="utf-8")
        notifier = Notifier()

        code = await run_import(bad_csv, [files[1]], api=AsyncMock(), notifier=notifier)

        assert code == EXIT_FAILED
        assert notifier.last.title == "Invalid CSV file"

    def test_main_missing_file(self, tmp_path, capsys):
        code = main([str(tmp_path / "missing.csv"), "--zip", str(tmp_path / "missing.zip")])

        assert code == EXIT_FAILED
        assert "file not found" in capsys.readouterr().err

    def test_main_runs_import(self, files):
        csv_path, zip_path = files
        with patch("product_admin.cli.run_import", new_callable=AsyncMock) as mock_run:
            mock_run.return_value = EXIT_OK
            code = main([str(csv_path), "--zip", str(zip_path), "--token", "secret"])

        assert code == EXIT_OK
        api = mock_run.call_args.kwargs["api"]
        assert api.access_token == "secret"
