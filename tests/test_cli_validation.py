import pytest

from quote_ratio.composition import build_analysis_settings
from quote_ratio.core.exceptions import ProviderMisconfigured
from quote_ratio.extractor import load_extractor
from quote_ratio.main import _build_parser
from quote_ratio.venues import JUPITER_V6_PROGRAM_ID, Venue

CONFIG = {
    "analysis": {
        "pages": 100,
        "page_size": 1000,
        "fetch_tx_delay_ms": 0,
        "fetch_acc_delay_ms": 250,
        "router_program_id": JUPITER_V6_PROGRAM_ID,
    }
}


def test_invalid_target_choice() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["analyze", "raydium"])


def test_analyze_flags_parse() -> None:
    args = _build_parser().parse_args(
        ["analyze", "lifinity", "--rpc", "https://rpc", "--pages", "3", "--page-size", "50", "--fetch-tx-delay", "20"]
    )
    assert args.target == "lifinity"
    assert args.pages == 3
    assert args.page_size == 50
    assert args.fetch_tx_delay == 20
    assert args.fetch_acc_delay is None


def test_settings_use_config_defaults_and_venue_address() -> None:
    settings = build_analysis_settings("obric", CONFIG)
    assert settings.venue is Venue.OBRIC
    assert settings.address == Venue.OBRIC.address
    assert settings.page_count == 100
    assert settings.page_size == 1000
    assert settings.fetch_acc_delay == 0.25
    assert settings.expected_total == 100_000


def test_settings_flags_override_config() -> None:
    settings = build_analysis_settings(
        "solfi",
        CONFIG,
        address=Venue.LIFINITY.address,
        pages=2,
        page_size=10,
        fetch_tx_delay_ms=1500,
        fetch_acc_delay_ms=0,
    )
    assert settings.venue.display_name == "SolFi"
    assert settings.address == Venue.LIFINITY.address
    assert settings.page_count == 2
    assert settings.fetch_tx_delay == 1.5
    assert settings.fetch_acc_delay == 0.0


def test_settings_reject_oversized_pages() -> None:
    with pytest.raises(ProviderMisconfigured):
        build_analysis_settings("obric", CONFIG, page_size=5000)


def test_unknown_venue_key() -> None:
    with pytest.raises(ProviderMisconfigured):
        build_analysis_settings("orca", CONFIG)


def test_load_extractor_resolves_dotted_path() -> None:
    from mock_api.extractor import extract

    assert load_extractor("mock_api.extractor:extract") is extract


@pytest.mark.parametrize("path", [None, "", "no_colon", "mock_api.extractor:missing", "not_a_module_xyz:extract"])
def test_load_extractor_rejects_bad_paths(path) -> None:
    with pytest.raises(ProviderMisconfigured):
        load_extractor(path)


def test_log_level_choices() -> None:
    parser = _build_parser()
    assert parser.parse_args(["--log-level", "DEBUG", "analyze", "obric"]).log_level == "debug"
    with pytest.raises(SystemExit):
        parser.parse_args(["--log-level", "verbose", "analyze", "obric"])
