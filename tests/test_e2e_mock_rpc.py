import httpx
import pytest

from mock_api.extractor import extract
from mock_api.server import app, reset_metrics
from quote_ratio.pipeline.runner import AnalysisSettings, run_analysis
from quote_ratio.rpc.http_client import RpcHttpClient
from quote_ratio.rpc.provider import RpcSettings, SolanaRpcProvider
from quote_ratio.venues import JUPITER_V6_PROGRAM_ID, Venue


def _expected(seed):
    sum_out = 0.0
    sum_exact = 0.0
    for record in seed["signatures"]:
        tx = seed["transactions"][record["signature"]]
        if tx["meta"]["err"] is not None:
            continue
        if JUPITER_V6_PROGRAM_ID not in [ix["programId"] for ix in tx["transaction"]["message"]["instructions"]]:
            continue
        result = tx["mockSwap"]["result"]
        if result is None:
            continue
        if [leg["amm"] for leg in result["swapLegs"]] != ["Obric"]:
            continue
        if float(result["outAmount"]) / float(result["exactOutAmount"]) > 10:
            continue
        sum_out += result["outAmountUSD"]
        sum_exact += result["exactOutAmountUSD"]
    return sum_out, sum_exact


@pytest.mark.asyncio
async def test_e2e_mock_rpc():
    reset_metrics()
    seed = app.state.seed
    settings = AnalysisSettings(venue=Venue.OBRIC, address=seed["address"], page_count=5, page_size=100)
    rpc_settings = RpcSettings(
        rpc_url="http://test/",
        api_key="",
        timeout=5,
        rps=1000,
        max_retries=0,
        backoff_base=0.1,
        backoff_max=0.1,
    )

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as async_client:
        provider = SolanaRpcProvider(rpc_settings, http_client=RpcHttpClient(async_client=async_client, rps=1000))
        context = await run_analysis(settings, provider, extract)

    metrics = app.state.metrics
    assert metrics["getSignaturesForAddress"] == 4
    assert metrics["getTransaction"] == len(seed["signatures"])
    assert 0 < metrics["getMultipleAccounts"] <= len(seed["accounts"])

    assert context.pages_fetched == 3
    assert context.fetched == len(seed["signatures"])
    assert context.processed == len(seed["signatures"])
    assert context.skipped_failed > 0
    assert context.skipped_not_routed > 0
    assert context.decode_failures > 0
    assert context.rejected > 0
    assert context.accepted > 0

    sum_out, sum_exact = _expected(seed)
    assert context.stats.sum_out_usd == pytest.approx(sum_out)
    assert context.stats.sum_exact_out_usd == pytest.approx(sum_exact)
    assert context.stats.ratio == pytest.approx(sum_out / sum_exact)
