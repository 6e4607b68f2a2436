"""Tests for relay-chain routing."""

import pytest

from conftest import FakeTransport
from drupal_wrapped.core.constants import ErrorConstants
from drupal_wrapped.core.exceptions import (
    AccessDenied,
    AggregateFetchError,
    HeaderRejected,
    NetworkLike,
    OperationCancelled,
)
from drupal_wrapped.services.proxy_router import (
    ProxyRouter,
    RelayTemplate,
    default_relay_templates,
    load_relay_templates,
)
from drupal_wrapped.services.transport import CancelToken

DRUPAL_URL = "https://www.drupal.org/jsonapi/user/user?filter[name]=dries&include=user_picture"

RELAYS = [
    RelayTemplate("one", "https://one.test/?{encoded_url}"),
    RelayTemplate("two", "https://two.test/fetch?quest={encoded_url}"),
    RelayTemplate("three", "https://three.test/fetch/{url}"),
    RelayTemplate("four", "https://four.test/raw?url={encoded_url}"),
]


class TestRelayTemplate:
    """Test relay URL rewriting."""

    def test_encoded_placeholder_matches_encode_uri_component(self):
        relay = RelayTemplate("corsproxy", "https://corsproxy.io/?{encoded_url}")
        assert relay.rewrite("https://www.drupal.org/a?b=c&d[e]=f") == (
            "https://corsproxy.io/?https%3A%2F%2Fwww.drupal.org%2Fa%3Fb%3Dc%26d%5Be%5D%3Df"
        )

    def test_raw_placeholder_keeps_url(self):
        relay = RelayTemplate("thingproxy", "https://thingproxy.freeboard.io/fetch/{url}")
        assert relay.rewrite("https://www.drupal.org/x") == "https://thingproxy.freeboard.io/fetch/https://www.drupal.org/x"

    def test_default_chain_order(self):
        assert [r.name for r in default_relay_templates()] == ["corsproxy", "codetabs", "thingproxy", "allorigins"]


class TestProxyRouter:
    """Test relay ordering, fallbacks and exhaustion."""

    def test_restricted_target_skips_direct_attempt(self):
        transport = FakeTransport([{"ok": True}])
        router = ProxyRouter(transport, RELAYS, restricted_domains=["drupal.org"])

        assert router.fetch_json(DRUPAL_URL) == {"ok": True}
        assert len(transport.calls) == 1
        assert transport.calls[0][0].startswith("https://one.test/")

    def test_feed_host_is_also_restricted(self):
        router = ProxyRouter(FakeTransport(), RELAYS, restricted_domains=["drupal.org"])
        assert router.needs_relay("https://new.drupal.org/contribution-records-by-user?username=x")
        assert not router.needs_relay("https://notdrupal.org/x")

    def test_stops_at_first_success_in_order(self):
        transport = FakeTransport([
            NetworkLike("timeout"),
            {"data": "second"},
        ])
        router = ProxyRouter(transport, RELAYS, restricted_domains=["drupal.org"])

        assert router.fetch_json(DRUPAL_URL) == {"data": "second"}
        called_hosts = [url.split("/")[2] for url, _ in transport.calls]
        assert called_hosts == ["one.test", "two.test"]

    def test_only_fourth_relay_succeeds_makes_exactly_four_calls(self):
        transport = FakeTransport([
            NetworkLike("timeout"),
            AccessDenied("Access Denied (CORS/Auth)", status=403),
            NetworkLike("Bad Gateway", status=502),
            {"data": "fourth"},
        ])
        router = ProxyRouter(transport, RELAYS, restricted_domains=["drupal.org"])

        assert router.fetch_json(DRUPAL_URL) == {"data": "fourth"}
        assert len(transport.calls) == 4

    def test_direct_then_two_relays_fail_third_relay_wins(self):
        body = {"data": [{"id": "1", "type": "user--user"}]}
        transport = FakeTransport([
            NetworkLike("direct failed"),
            NetworkLike("relay one failed"),
            NetworkLike("relay two failed"),
            body,
        ])
        router = ProxyRouter(transport, RELAYS, restricted_domains=["drupal.org"])

        result = router.fetch_json("https://api.example.com/data")

        assert result == body
        assert transport.calls[0][0] == "https://api.example.com/data"
        assert transport.calls[3][0].startswith("https://three.test/fetch/")
        assert len(transport.calls) == 4

    def test_exhaustion_reports_most_recent_error(self):
        transport = FakeTransport([
            NetworkLike("first"),
            NetworkLike("second"),
            NetworkLike("third"),
            HeaderRejected("Not Acceptable", status=406),
        ])
        router = ProxyRouter(transport, RELAYS, restricted_domains=["drupal.org"])

        with pytest.raises(AggregateFetchError) as exc_info:
            router.fetch_json(DRUPAL_URL)

        assert exc_info.value.message == "Not Acceptable"
        assert len(exc_info.value.attempts) == 4

    def test_exhaustion_without_errors_uses_generic_message(self):
        router = ProxyRouter(FakeTransport(), [], restricted_domains=["drupal.org"])

        with pytest.raises(AggregateFetchError) as exc_info:
            router.fetch_json(DRUPAL_URL)

        assert exc_info.value.message == ErrorConstants.GENERIC_CONNECTIVITY_MESSAGE

    def test_each_call_restarts_from_first_relay(self):
        transport = FakeTransport([NetworkLike("x"), {"n": 1}, NetworkLike("x"), {"n": 2}])
        router = ProxyRouter(transport, RELAYS, restricted_domains=["drupal.org"])

        router.fetch_json(DRUPAL_URL)
        router.fetch_json(DRUPAL_URL)

        hosts = [url.split("/")[2] for url, _ in transport.calls]
        assert hosts == ["one.test", "two.test", "one.test", "two.test"]

    def test_headers_are_passed_to_every_attempt(self):
        transport = FakeTransport([NetworkLike("x"), {}])
        router = ProxyRouter(transport, RELAYS, restricted_domains=["drupal.org"])

        router.fetch_json(DRUPAL_URL, {"Accept": "application/vnd.api+json"})

        assert all(h == {"Accept": "application/vnd.api+json"} for _, h in transport.calls)

    def test_cancelled_token_stops_the_chain(self):
        token = CancelToken()
        token.cancel()
        transport = FakeTransport([{}])
        router = ProxyRouter(transport, RELAYS, restricted_domains=["drupal.org"])

        with pytest.raises(OperationCancelled):
            router.fetch_json(DRUPAL_URL, cancel=token)
        assert transport.calls == []


class TestLoadRelayTemplates:
    """Test relay configuration loading."""

    def test_loads_ordered_relays_from_yaml(self, tmp_path):
        relays_file = tmp_path / "relays.yaml"
        relays_file.write_text(
            "relays:\n"
            "  - name: b\n"
            "    template: 'https://b.test/?{encoded_url}'\n"
            "  - name: a\n"
            "    template: 'https://a.test/{url}'\n",
            encoding="utf-8",
        )

        relays = load_relay_templates(str(relays_file))
        assert [r.name for r in relays] == ["b", "a"]

    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        relays = load_relay_templates(str(tmp_path / "missing.yaml"))
        assert relays == default_relay_templates()

    def test_template_without_placeholder_falls_back_to_defaults(self, tmp_path):
        relays_file = tmp_path / "relays.yaml"
        relays_file.write_text("relays:\n  - name: bad\n    template: 'https://bad.test/'\n", encoding="utf-8")

        assert load_relay_templates(str(relays_file)) == default_relay_templates()
