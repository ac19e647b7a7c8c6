"""Tests for the command-line entry point."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.analysis.types import AnalysisErrorResult
from src.main import build_parser, main


def test_parser_maps_flags():
    args = build_parser().parse_args(["--contract", "0xabc", "--chain", "eth", "--name", "uni"])
    assert args.contract_address == "0xabc"
    assert args.chain == "eth"
    assert args.coin_name == "uni"
    assert args.client_id == "cli"


@pytest.mark.asyncio
async def test_main_prints_result_and_closes(capsys):
    analyzer = MagicMock()
    analyzer.analyze = AsyncMock(return_value=AnalysisErrorResult(
        error_type="not_found", message="No asset matches 'zzz'",
        processing_time_ms=3, timestamp="2026-01-01T00:00:00.000Z",
    ))
    analyzer.close = AsyncMock()

    with patch("src.main.setup_logger"), patch(
        "src.main.RiskAnalyzer.from_settings", return_value=analyzer,
    ):
        code = await main(["--name", "zzz"])

    out = json.loads(capsys.readouterr().out)
    assert code == 1
    assert out["error"] is True
    assert out["error_type"] == "not_found"
    request = analyzer.analyze.await_args.args[0]
    assert request.coin_name == "zzz"
    analyzer.close.assert_awaited_once()
