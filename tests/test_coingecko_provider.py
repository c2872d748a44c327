"""
CoinGecko adapter tests with mocked HTTP: URL construction, normalization of
each endpoint onto the domain types, tolerated shape quirks and typed errors.
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from crypto_marketdata.errors import DecodingError, InvalidURL, RequestFailed
from crypto_marketdata.providers.base import GlobalMarketSummary, HistoricalPoint, MarketOrder, MarketQuery
from crypto_marketdata.providers.coingecko import COINGECKO_BASE_URL, CoinGeckoProvider
from crypto_marketdata.providers.coingecko.schemas import MarketChartResponse, MarketRow
from tests.fakes.http import RoutingSession, make_response, make_transport, path_of, query_of

GLOBAL_PAYLOAD = {
    "data": {
        "active_cryptocurrencies": 14000,
        "total_market_cap": {"usd": 2.5e12, "btc": 3.9e7},
        "total_volume": {"usd": 9.1e10, "btc": 1.4e6},
        "market_cap_percentage": {"btc": 52.3, "eth": 16.9, "usdt": 4.4},
        "market_cap_change_percentage_24h_usd": -1.25,
        "updated_at": 1700000000,
    }
}

MARKET_ROW = {
    "id": "bitcoin",
    "symbol": "btc",
    "name": "Bitcoin",
    "image": "https://assets.example.test/bitcoin.png",
    "current_price": 64000.5,
    "market_cap": 1.26e12,
    "total_volume": 3.1e10,
    "price_change_percentage_24h": 2.4,
    "price_change_percentage_1h_in_currency": -0.3,
    "sparkline_in_7d": {"price": [63000.0, 63500.25, 64000.5]},
}


def _provider(payload=None, status_code=200, **resp_kwargs):
    session = RoutingSession({COINGECKO_BASE_URL: make_response(payload, status_code, **resp_kwargs)})
    return CoinGeckoProvider(make_transport(session)), session


class TestCurrentPrices:
    def test_returns_exactly_upstream_ids(self):
        gecko, session = _provider({"bitcoin": {"usd": 64000.5}, "ethereum": {"usd": 3000}})
        prices = gecko.get_current_prices(["bitcoin", "ethereum", "not-a-coin"])
        assert prices == {"bitcoin": 64000.5, "ethereum": 3000.0}
        assert "not-a-coin" not in prices

    def test_url(self):
        gecko, session = _provider({})
        gecko.get_current_prices(["bitcoin", "ethereum"])
        (url,) = session.calls
        assert path_of(url) == "/api/v3/simple/price"
        assert query_of(url) == {"ids": "bitcoin,ethereum", "vs_currencies": "usd"}

    def test_entry_without_usd_is_decoding_error(self):
        gecko, _ = _provider({"bitcoin": {"eur": 59000.0}})
        with pytest.raises(DecodingError):
            gecko.get_current_prices(["bitcoin"])

    def test_empty_ids_is_invalid_url_before_request(self):
        gecko, session = _provider({})
        with pytest.raises(InvalidURL):
            gecko.get_current_prices([])
        assert session.calls == []

    def test_bad_id_is_invalid_url_before_request(self):
        gecko, session = _provider({})
        with pytest.raises(InvalidURL):
            gecko.get_current_prices(["bitcoin", "bad id"])
        assert session.calls == []

    def test_accepts_any_iterable(self):
        gecko, _ = _provider({"solana": {"usd": 150.0}})
        assert gecko.get_current_prices(iter(["solana"])) == {"solana": 150.0}


class TestHistoricalPrices:
    def test_timestamps_are_ms_over_1000(self):
        gecko, _ = _provider({"prices": [[1700000000000, 100.0], [1700003600000, 101.5]]})
        points = gecko.get_historical_prices("bitcoin", days=1)
        assert points == [
            HistoricalPoint(datetime.fromtimestamp(1700000000, tz=timezone.utc), 100.0),
            HistoricalPoint(datetime.fromtimestamp(1700003600, tz=timezone.utc), 101.5),
        ]
        assert [p.timestamp.timestamp() for p in points] == [1700000000.0, 1700003600.0]

    def test_drops_entries_not_of_length_two_and_keeps_order(self):
        gecko, _ = _provider(
            {
                "prices": [
                    [1700000000000, 1.0],
                    [1700000060000],
                    [1700000120000, 3.0],
                    [1700000180000, 4.0, 99.0],
                    [],
                    [1700000240000, 5.0],
                ]
            }
        )
        points = gecko.get_historical_prices("bitcoin", days=1)
        assert [p.price for p in points] == [1.0, 3.0, 5.0]
        assert points == sorted(points, key=lambda p: p.timestamp)

    def test_url(self):
        gecko, session = _provider({"prices": []})
        assert gecko.get_historical_prices("wrapped-bitcoin", days=30) == []
        (url,) = session.calls
        assert path_of(url) == "/api/v3/coins/wrapped-bitcoin/market_chart"
        assert query_of(url) == {"vs_currency": "usd", "days": "30"}

    @pytest.mark.parametrize("days", [0, -3, True, 1.5])
    def test_bad_days(self, days):
        gecko, session = _provider({"prices": []})
        with pytest.raises(InvalidURL):
            gecko.get_historical_prices("bitcoin", days=days)
        assert session.calls == []

    def test_non_numeric_entry_is_decoding_error(self):
        gecko, _ = _provider({"prices": [[1700000000000, "100.0"]]})
        with pytest.raises(DecodingError):
            gecko.get_historical_prices("bitcoin", days=1)

    @pytest.mark.parametrize("ms", [1e20, -1e20])
    def test_out_of_range_timestamp_is_decoding_error(self, ms):
        gecko, _ = _provider({"prices": [[1700000000000, 1.0], [ms, 1.0]]})
        with pytest.raises(DecodingError, match="out of range"):
            gecko.get_historical_prices("bitcoin", days=1)

    def test_missing_prices_key(self):
        gecko, _ = _provider({"market_caps": []})
        with pytest.raises(DecodingError):
            gecko.get_historical_prices("bitcoin", days=1)

    def test_schema_keeps_malformed_rows_until_translation(self):
        chart = MarketChartResponse.from_json({"prices": [[1, 2], [3]]})
        assert chart.prices == ((1.0, 2.0), (3.0,))


class TestGlobalData:
    def test_unwraps_data_envelope(self):
        gecko, session = _provider(GLOBAL_PAYLOAD)
        summary = gecko.fetch_global_data()
        assert summary == GlobalMarketSummary(
            total_market_cap={"usd": 2.5e12, "btc": 3.9e7},
            total_volume={"usd": 9.1e10, "btc": 1.4e6},
            market_cap_percentage={"btc": 52.3, "eth": 16.9, "usdt": 4.4},
            market_cap_change_percentage_24h_usd=-1.25,
        )
        assert summary.btc_dominance == 52.3
        assert path_of(session.calls[0]) == "/api/v3/global"

    def test_protocol_method_matches(self):
        gecko, _ = _provider(GLOBAL_PAYLOAD)
        assert gecko.get_global_summary() == gecko.fetch_global_data()

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"data": None},
            {"data": {**GLOBAL_PAYLOAD["data"], "total_volume": "lots"}},
            {"data": {k: v for k, v in GLOBAL_PAYLOAD["data"].items() if k != "market_cap_percentage"}},
            [GLOBAL_PAYLOAD],
        ],
    )
    def test_shape_mismatch(self, payload):
        gecko, _ = _provider(payload)
        with pytest.raises(DecodingError):
            gecko.fetch_global_data()


class TestMarkets:
    def test_decodes_rows(self):
        gecko, _ = _provider([MARKET_ROW])
        (coin,) = gecko.fetch_markets(per_page=1, sparkline=True)
        assert coin.id == "bitcoin"
        assert coin.symbol == "btc"
        assert coin.name == "Bitcoin"
        assert coin.price == 64000.5
        assert coin.daily_change == 2.4
        assert coin.hourly_change == -0.3
        assert coin.volume == 3.1e10
        assert coin.market_cap == 1.26e12
        assert coin.is_favorite is False
        assert coin.sparkline == (63000.0, 63500.25, 64000.5)
        assert coin.image_url == "https://assets.example.test/bitcoin.png"
        assert coin.final_image_url == coin.image_url

    def test_url(self):
        gecko, session = _provider([])
        gecko.fetch_markets(vs_currency="eur", order=MarketOrder.MARKET_CAP_DESC, per_page=25, page=3, sparkline=True)
        (url,) = session.calls
        assert path_of(url) == "/api/v3/coins/markets"
        assert query_of(url) == {
            "vs_currency": "eur",
            "order": "market_cap_desc",
            "per_page": "25",
            "page": "3",
            "sparkline": "true",
            "price_change_percentage": "1h,24h",
        }

    def test_sparkline_flag_false(self):
        gecko, session = _provider([])
        gecko.fetch_markets()
        assert query_of(session.calls[0])["sparkline"] == "false"

    def test_optional_fields_absent(self):
        row = {k: v for k, v in MARKET_ROW.items() if k not in ("price_change_percentage_1h_in_currency", "sparkline_in_7d", "image")}
        gecko, _ = _provider([row])
        (coin,) = gecko.fetch_markets()
        assert coin.hourly_change == 0.0
        assert coin.sparkline is None
        assert coin.image_url is None

    def test_null_numbers_read_as_zero(self):
        gecko, _ = _provider([{**MARKET_ROW, "price_change_percentage_24h": None, "market_cap": None}])
        (coin,) = gecko.fetch_markets()
        assert coin.daily_change == 0.0
        assert coin.market_cap == 0.0

    def test_missing_required_field(self):
        gecko, _ = _provider([{k: v for k, v in MARKET_ROW.items() if k != "current_price"}])
        with pytest.raises(DecodingError, match="current_price"):
            gecko.fetch_markets()

    def test_query_passthrough(self):
        gecko, session = _provider([MARKET_ROW])
        coins = gecko.get_markets(MarketQuery(per_page=10, page=2))
        assert [c.id for c in coins] == ["bitcoin"]
        assert query_of(session.calls[0])["page"] == "2"

    def test_bad_paging(self):
        gecko, session = _provider([])
        with pytest.raises(InvalidURL):
            gecko.fetch_markets(per_page=0)
        assert session.calls == []

    def test_row_schema_index_in_error(self):
        with pytest.raises(DecodingError, match=r"coins/markets\[4\]"):
            MarketRow.from_json({"id": "x"}, index=4)


class TestFailures:
    CALLS = [
        pytest.param(lambda g: g.get_current_prices(["bitcoin"]), id="prices"),
        pytest.param(lambda g: g.get_historical_prices("bitcoin", 7), id="history"),
        pytest.param(lambda g: g.fetch_global_data(), id="global"),
        pytest.param(lambda g: g.fetch_markets(), id="markets"),
    ]

    @pytest.mark.parametrize("call", CALLS)
    @pytest.mark.parametrize("status", [400, 429, 500, 503])
    def test_non_2xx_is_request_failed_without_decoding(self, call, status):
        gecko, session = _provider({"error": "nope"}, status_code=status)
        with pytest.raises(RequestFailed):
            call(gecko)
        session.routes[COINGECKO_BASE_URL].json.assert_not_called()

    @pytest.mark.parametrize("call", CALLS)
    def test_malformed_json_is_decoding_error(self, call):
        gecko, _ = _provider(bad_json=True)
        with pytest.raises(DecodingError):
            call(gecko)


class TestIdempotence:
    def test_repeated_calls_equal(self):
        session = RoutingSession(
            {
                f"{COINGECKO_BASE_URL}/global": make_response(GLOBAL_PAYLOAD),
                f"{COINGECKO_BASE_URL}/coins/markets": make_response([MARKET_ROW]),
                f"{COINGECKO_BASE_URL}/coins/bitcoin/market_chart": make_response(
                    {"prices": [[1700000000000, 100.0]]}
                ),
                f"{COINGECKO_BASE_URL}/simple/price": make_response({"bitcoin": {"usd": 1.0}}),
            }
        )
        gecko = CoinGeckoProvider(make_transport(session))
        for call in (
            lambda: gecko.fetch_global_data(),
            lambda: gecko.fetch_markets(sparkline=True),
            lambda: gecko.get_historical_prices("bitcoin", 1),
            lambda: gecko.get_current_prices(["bitcoin"]),
        ):
            assert call() == call()
