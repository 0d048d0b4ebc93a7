import unittest

import ccxt
from requests.exceptions import ConnectionError as RequestsConnectionError

from market.models import OpenInterest
from market_data.base import MarketDataError
from market_data.binance import BinanceMarketDataClient
from market_data.ccxt_client import CcxtMarketDataClient
from market_data.clients import get_market_data_client, reset_clients, set_market_data_client
from snapshot_config import SnapshotConfig


class _StubBinanceClient:
    def __init__(self, *, error=None):
        self._error = error
        self.kline_calls = []

    def futures_klines(self, symbol, interval, limit):  # noqa: D401
        if self._error is not None:
            raise self._error
        self.kline_calls.append({"symbol": symbol, "interval": interval, "limit": limit})
        return [
            [180000, "101.0", "103.0", "100.0", "102.0", "7.5", 359999, "0", 3, "0", "0", "0"],
            [0, "100.0", "102.0", "99.0", "101.0", "5.0", 179999, "0", 2, "0", "0", "0"],
        ]

    def futures_open_interest(self, symbol):  # noqa: D401
        if self._error is not None:
            raise self._error
        return {"symbol": symbol, "openInterest": "1000.0", "time": 0}

    def futures_mark_price(self, symbol):  # noqa: D401
        if self._error is not None:
            raise self._error
        return {"symbol": symbol, "markPrice": "101.0", "lastFundingRate": "0.00012"}


class _StubCcxtExchange:
    id = "binanceusdm"

    def __init__(self, *, error=None):
        self._error = error
        self.ohlcv_calls = []

    def fetch_ohlcv(self, symbol, timeframe, limit):  # noqa: D401
        if self._error is not None:
            raise self._error
        self.ohlcv_calls.append((symbol, timeframe, limit))
        return [[0, 10.0, 11.0, 9.0, 10.5, 3.0], [180000, 10.5, 12.0, 10.0, 11.5, 4.0]]

    def fetch_open_interest(self, symbol):  # noqa: D401
        if self._error is not None:
            raise self._error
        return {"symbol": symbol, "openInterestAmount": 250.0, "info": {}}

    def fetch_funding_rate(self, symbol):  # noqa: D401
        if self._error is not None:
            raise self._error
        return {"symbol": symbol, "fundingRate": -0.0003}


class BinanceMarketDataClientTests(unittest.TestCase):
    def test_fetch_candles_parses_and_sorts_klines(self) -> None:
        stub = _StubBinanceClient()
        client = BinanceMarketDataClient(stub)

        candles = client.fetch_candles("BTCUSDT", "3m", 2)

        self.assertEqual(stub.kline_calls, [{"symbol": "BTCUSDT", "interval": "3m", "limit": 2}])
        self.assertEqual([c.open_time for c in candles], [0, 180000])
        self.assertEqual(candles[0].close, 101.0)
        self.assertEqual(candles[1].volume, 7.5)
        self.assertEqual(candles[1].close_time, 359999)

    def test_open_interest_uses_placeholder_average(self) -> None:
        client = BinanceMarketDataClient(_StubBinanceClient())
        result = client.fetch_open_interest("BTCUSDT")
        self.assertEqual(result.latest, 1000.0)
        self.assertAlmostEqual(result.average, 999.0)

    def test_funding_rate_reads_last_funding_rate(self) -> None:
        client = BinanceMarketDataClient(_StubBinanceClient())
        self.assertEqual(client.fetch_funding_rate("BTCUSDT"), 0.00012)

    def test_malformed_klines_become_market_data_errors(self) -> None:
        stub = _StubBinanceClient()
        stub.futures_klines = lambda symbol, interval, limit: [[0, "1", "2", "0.5", "1.5"]]
        client = BinanceMarketDataClient(stub)
        with self.assertRaises(MarketDataError) as ctx:
            client.fetch_candles("BTCUSDT", "3m", 40)
        self.assertIn("BTCUSDT 3m", str(ctx.exception))

    def test_transport_errors_become_market_data_errors(self) -> None:
        client = BinanceMarketDataClient(_StubBinanceClient(error=RequestsConnectionError("reset")))
        with self.assertRaises(MarketDataError):
            client.fetch_candles("BTCUSDT", "3m", 40)
        with self.assertRaises(MarketDataError):
            client.fetch_open_interest("BTCUSDT")
        with self.assertRaises(MarketDataError):
            client.fetch_funding_rate("BTCUSDT")


class CcxtMarketDataClientTests(unittest.TestCase):
    def test_fetch_candles_maps_symbol_and_close_time(self) -> None:
        stub = _StubCcxtExchange()
        client = CcxtMarketDataClient(stub)

        candles = client.fetch_candles("BTCUSDT", "3m", 2)

        self.assertEqual(stub.ohlcv_calls, [("BTC/USDT:USDT", "3m", 2)])
        self.assertEqual(len(candles), 2)
        self.assertEqual(candles[0].close_time, 179999)
        self.assertEqual(candles[1].high, 12.0)

    def test_open_interest_and_funding(self) -> None:
        client = CcxtMarketDataClient(_StubCcxtExchange())
        oi = client.fetch_open_interest("ETHUSDT")
        self.assertEqual(oi.latest, 250.0)
        self.assertAlmostEqual(oi.average, 249.75)
        self.assertEqual(client.fetch_funding_rate("ETHUSDT"), -0.0003)

    def test_null_timestamp_rows_become_market_data_errors(self) -> None:
        stub = _StubCcxtExchange()
        stub.fetch_ohlcv = lambda symbol, timeframe, limit: [[None, 10.0, 11.0, 9.0, 10.5, 3.0]]
        client = CcxtMarketDataClient(stub)
        with self.assertRaises(MarketDataError) as ctx:
            client.fetch_candles("BTCUSDT", "3m", 40)
        self.assertIn("BTC/USDT:USDT 3m", str(ctx.exception))

    def test_ccxt_errors_become_market_data_errors(self) -> None:
        client = CcxtMarketDataClient(_StubCcxtExchange(error=ccxt.NetworkError("timeout")))
        with self.assertRaises(MarketDataError):
            client.fetch_candles("BTCUSDT", "4h", 60)
        with self.assertRaises(MarketDataError):
            client.fetch_funding_rate("BTCUSDT")


class MarketDataClientFactoryTests(unittest.TestCase):
    def tearDown(self) -> None:
        reset_clients()

    def _config(self, backend: str, exchange_id: str = "binanceusdm") -> SnapshotConfig:
        return SnapshotConfig(
            market_data_backend=backend,
            ccxt_exchange_id=exchange_id,
            api_key="",
            api_secret="",
            scan_interval_minutes=3,
            long_term_limit=60,
            quote_asset="USDT",
            request_timeout=5.0,
        )

    def test_cached_client_is_returned(self) -> None:
        stub = BinanceMarketDataClient(_StubBinanceClient())
        set_market_data_client(stub)
        self.assertIs(get_market_data_client(self._config("binance")), stub)

    def test_ccxt_backend_builds_exchange(self) -> None:
        client = get_market_data_client(self._config("ccxt"))
        self.assertIsInstance(client, CcxtMarketDataClient)
        self.assertIs(get_market_data_client(self._config("ccxt")), client)

    def test_unknown_ccxt_exchange_raises(self) -> None:
        with self.assertRaises(MarketDataError):
            get_market_data_client(self._config("ccxt", exchange_id="not_an_exchange"))

    def test_open_interest_default_is_zero(self) -> None:
        self.assertEqual(OpenInterest(), OpenInterest(0.0, 0.0))


if __name__ == "__main__":
    unittest.main()
