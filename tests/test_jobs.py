"""Tests for the catalog sync job."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from manamarket.jobs.sync_catalog import main, run_sync
from manamarket.models.catalog import Catalog
from manamarket.parsers.inventory_csv import SourceUnavailableError
from manamarket.services.catalog_assembler import AssemblyReport, LookupFailure


@pytest.fixture
def sample_report(sample_catalog: Catalog) -> AssemblyReport:
    return AssemblyReport(
        catalog=sample_catalog,
        attempted=4,
        succeeded=3,
        failures=[LookupFailure(name="Typo", reason="not found")],
    )


class TestRunSync:
    async def test_returns_report(self, sample_report: AssemblyReport) -> None:
        with patch(
            "manamarket.jobs.sync_catalog.load_catalog",
            new_callable=AsyncMock,
            return_value=sample_report,
        ) as load:
            report = await run_sync(Path("cards.csv"))

        assert report is sample_report
        assert load.await_args.args[1] == Path("cards.csv")

    async def test_propagates_source_errors(self) -> None:
        with (
            patch(
                "manamarket.jobs.sync_catalog.load_catalog",
                new_callable=AsyncMock,
                side_effect=SourceUnavailableError("cards.csv", "missing"),
            ),
            pytest.raises(SourceUnavailableError),
        ):
            await run_sync(Path("cards.csv"))


class TestMain:
    def test_success_exit_code(self, sample_report: AssemblyReport) -> None:
        with patch(
            "manamarket.jobs.sync_catalog.load_catalog",
            new_callable=AsyncMock,
            return_value=sample_report,
        ):
            assert main(["cards.csv"]) == 0

    def test_failure_exit_code(self) -> None:
        with patch(
            "manamarket.jobs.sync_catalog.load_catalog",
            new_callable=AsyncMock,
            side_effect=SourceUnavailableError("cards.csv", "missing"),
        ):
            assert main(["cards.csv"]) == 1

    def test_unreadable_inventory_exit_code(self, tmp_path: Path) -> None:
        path = tmp_path / "cards.csv"
        path.write_bytes(b"Name,Purchase price,Quantity\n\xe9,1,1\n")

        assert main([str(path)]) == 1
