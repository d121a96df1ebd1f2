"""
Unit tests for the hub client's read operations and error handling.

Uses respx to mock the hub's HTTP API, so no running hub is required.
Tests verify request parameters, response parsing, the not-found
convention and the error-logging hook.
"""

from __future__ import annotations

import logging

import httpx
import pytest
import respx
from pydantic import ValidationError

from farcaster_hub_rest import (
    FarcasterNetwork,
    HexDecodeError,
    HubApiError,
    HubRestClient,
    HubRestClientConfig,
    OnChainEventIdRegister,
    OnChainEventSigner,
    OnChainEventType,
    ReactionType,
    UserDataType,
    api_error_code,
    collect,
    is_api_error_response,
    not_found_as_none,
)
from farcaster_hub_rest.client import _HttpClient
from farcaster_hub_rest.types import CastId


HUB_URL = "http://hub.test:2281"
CAST_HASH = "0x" + "ab" * 20


def cast_json(fid: int = 2, text: str = "hello", hash: str = CAST_HASH) -> dict:
    return {
        "data": {
            "type": "MESSAGE_TYPE_CAST_ADD",
            "fid": fid,
            "timestamp": 100000,
            "network": "FARCASTER_NETWORK_MAINNET",
            "castAddBody": {
                "embedsDeprecated": [],
                "mentions": [],
                "text": text,
                "mentionsPositions": [],
                "embeds": [],
            },
        },
        "hash": hash,
        "hashScheme": "HASH_SCHEME_BLAKE3",
        "signature": "c2lnbmF0dXJl",
        "signatureScheme": "SIGNATURE_SCHEME_ED25519",
        "signer": "0x" + "cd" * 32,
    }


def error_json(err_code: str) -> dict:
    return {
        "errCode": err_code,
        "presentable": False,
        "name": "HubError",
        "code": 3,
        "details": "something went wrong",
        "metadata": {"errcode": [err_code]},
    }


def signer_event_json(fid: int = 3) -> dict:
    return {
        "type": "EVENT_TYPE_SIGNER",
        "chainId": 10,
        "blockNumber": 108875854,
        "blockHash": "0x" + "11" * 32,
        "blockTimestamp": 1693350485,
        "transactionHash": "0x" + "22" * 32,
        "logIndex": 83,
        "txIndex": 0,
        "fid": fid,
        "signerEventBody": {
            "key": "0x" + "33" * 32,
            "keyType": 1,
            "eventType": "SIGNER_EVENT_TYPE_ADD",
            "metadata": "AAAA",
            "metadataType": 1,
        },
    }


# ============================================================
#  HTTP Client
# ============================================================


@pytest.mark.asyncio
async def test_http_client_get() -> None:
    """HTTP client strips the trailing slash and drops None params."""
    with respx.mock:
        route = respx.get(url__startswith=f"{HUB_URL}/v1/castById").mock(
            return_value=httpx.Response(200, json=cast_json())
        )
        client = _HttpClient(HUB_URL + "/")
        data = await client.request("GET", "/v1/castById", params={"fid": 2, "hash": None})
        await client.close()

        assert route.called
        params = route.calls.last.request.url.params
        assert params["fid"] == "2"
        assert "hash" not in params
        assert data["data"]["fid"] == 2


@pytest.mark.asyncio
async def test_http_client_post_bytes() -> None:
    """Binary bodies are sent as application/octet-stream."""
    with respx.mock:
        route = respx.post(f"{HUB_URL}/v1/submitMessage").mock(
            return_value=httpx.Response(200, json=cast_json())
        )
        client = _HttpClient(HUB_URL)
        await client.request("POST", "/v1/submitMessage", content=b"\x0a\x00")
        await client.close()

        request = route.calls.last.request
        assert request.headers["content-type"] == "application/octet-stream"
        assert request.content == b"\x0a\x00"


@pytest.mark.asyncio
async def test_supplied_http_client_is_hooked_but_not_closed() -> None:
    """A supplied transport gets the logging hook, which close() takes back off."""
    async with httpx.AsyncClient() as http:
        client = HubRestClient(HUB_URL, http_client=http)
        assert len(http.event_hooks["response"]) == 1
        await client.close()
        assert not http.is_closed
        assert http.event_hooks["response"] == []


@pytest.mark.asyncio
async def test_shared_http_client_logs_each_error_once(caplog: pytest.LogCaptureFixture) -> None:
    """Clients sharing one transport install a single hook between them."""
    caplog.set_level(logging.WARNING, logger="farcaster_hub_rest")
    with respx.mock:
        respx.get(url__startswith=f"{HUB_URL}/v1/storageLimitsByFid").mock(
            return_value=httpx.Response(400, json=error_json("bad_request"))
        )
        async with httpx.AsyncClient() as http:
            for _ in range(3):
                HubRestClient(HUB_URL, http_client=http)
            client = HubRestClient(HUB_URL, http_client=http)

            assert len(http.event_hooks["response"]) == 1
            with pytest.raises(HubApiError):
                await client.storage.get_storage_limits_by_fid(1)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1


@pytest.mark.asyncio
async def test_hook_reinstalled_after_sharing_client_closes(caplog: pytest.LogCaptureFixture) -> None:
    """Closing the client that installed the hook leaves the others still logging."""
    caplog.set_level(logging.WARNING, logger="farcaster_hub_rest")
    with respx.mock:
        respx.get(url__startswith=f"{HUB_URL}/v1/storageLimitsByFid").mock(
            return_value=httpx.Response(400, json=error_json("bad_request"))
        )
        async with httpx.AsyncClient() as http:
            first = HubRestClient(HUB_URL, http_client=http)
            second = HubRestClient(HUB_URL, http_client=http)
            await first.close()
            assert http.event_hooks["response"] == []

            with pytest.raises(HubApiError):
                await second.storage.get_storage_limits_by_fid(1)
            assert len(http.event_hooks["response"]) == 1
            await second.close()

    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1


@pytest.mark.asyncio
async def test_client_from_config() -> None:
    """Config objects build a client with their URL and network."""
    config = HubRestClientConfig(hub_url="http://other.test/", network=FarcasterNetwork.TESTNET)
    async with HubRestClient.from_config(config) as client:
        assert client.hub_url == "http://other.test"
        assert client.network == FarcasterNetwork.TESTNET


# ============================================================
#  Errors and logging
# ============================================================


@pytest.mark.asyncio
async def test_cast_not_found_returns_none() -> None:
    """A not_found error on a cast lookup becomes None."""
    with respx.mock:
        respx.get(url__startswith=f"{HUB_URL}/v1/castById").mock(
            return_value=httpx.Response(400, json=error_json("not_found"))
        )
        async with HubRestClient(HUB_URL) as client:
            cast = await client.casts.get_cast_by_id(CastId(fid=2, hash=CAST_HASH))

        assert cast is None


@pytest.mark.asyncio
async def test_other_api_error_propagates_with_code() -> None:
    """Structured errors other than not_found raise HubApiError with the code."""
    with respx.mock:
        respx.get(url__startswith=f"{HUB_URL}/v1/castById").mock(
            return_value=httpx.Response(400, json=error_json("bad_request.validation_failure"))
        )
        async with HubRestClient(HUB_URL) as client:
            with pytest.raises(HubApiError) as exc_info:
                await client.casts.get_cast_by_id(CastId(fid=2, hash=CAST_HASH))

        assert exc_info.value.err_code == "bad_request.validation_failure"
        assert exc_info.value.error.presentable is False
        assert exc_info.value.response.status_code == 400
        assert is_api_error_response(exc_info.value)


@pytest.mark.asyncio
async def test_unstructured_error_is_plain_status_error() -> None:
    """Error bodies without errCode raise a plain HTTPStatusError."""
    with respx.mock:
        respx.get(url__startswith=f"{HUB_URL}/v1/castById").mock(
            return_value=httpx.Response(500, text="upstream exploded")
        )
        async with HubRestClient(HUB_URL) as client:
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                await client.casts.get_cast_by_id(CastId(fid=2, hash=CAST_HASH))

        assert not is_api_error_response(exc_info.value)
        assert not isinstance(exc_info.value, HubApiError)


@pytest.mark.asyncio
async def test_transport_error_propagates() -> None:
    """Connection failures reach the caller unchanged."""
    with respx.mock:
        respx.get(url__startswith=f"{HUB_URL}/v1/castById").mock(
            side_effect=httpx.ConnectError("connection refused")
        )
        async with HubRestClient(HUB_URL) as client:
            with pytest.raises(httpx.ConnectError):
                await client.casts.get_cast_by_id(CastId(fid=2, hash=CAST_HASH))


@pytest.mark.asyncio
async def test_api_errors_are_logged_at_warning(caplog: pytest.LogCaptureFixture) -> None:
    """The response hook logs every structured error, including not_found."""
    caplog.set_level(logging.WARNING, logger="farcaster_hub_rest")
    with respx.mock:
        respx.get(url__startswith=f"{HUB_URL}/v1/castById").mock(
            return_value=httpx.Response(400, json=error_json("not_found"))
        )
        async with HubRestClient(HUB_URL) as client:
            assert await client.casts.get_cast_by_id(CastId(fid=2, hash=CAST_HASH)) is None

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert warnings[0].getMessage().startswith("API errors: ")
    assert "not_found" in warnings[0].getMessage()


@pytest.mark.asyncio
async def test_custom_logger_receives_api_errors(caplog: pytest.LogCaptureFixture) -> None:
    """A logger passed to the client receives the error log."""
    custom = logging.getLogger("tests.hub")
    caplog.set_level(logging.WARNING, logger="tests.hub")
    with respx.mock:
        respx.get(url__startswith=f"{HUB_URL}/v1/storageLimitsByFid").mock(
            return_value=httpx.Response(400, json=error_json("bad_request"))
        )
        async with HubRestClient(HUB_URL, logger=custom) as client:
            with pytest.raises(HubApiError):
                await client.storage.get_storage_limits_by_fid(1)

    assert any(r.name == "tests.hub" and "API errors" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_success_is_not_logged(caplog: pytest.LogCaptureFixture) -> None:
    """Successful responses produce no warnings."""
    caplog.set_level(logging.WARNING, logger="farcaster_hub_rest")
    with respx.mock:
        respx.get(url__startswith=f"{HUB_URL}/v1/castById").mock(
            return_value=httpx.Response(200, json=cast_json())
        )
        async with HubRestClient(HUB_URL) as client:
            await client.casts.get_cast_by_id(CastId(fid=2, hash=CAST_HASH))

    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


# ============================================================
#  Reads
# ============================================================


@pytest.mark.asyncio
async def test_get_hub_info_with_db_stats() -> None:
    """Hub info requests dbstats and parses the stats block."""
    with respx.mock:
        route = respx.get(url__startswith=f"{HUB_URL}/v1/info").mock(
            return_value=httpx.Response(
                200,
                json={
                    "version": "1.5.0",
                    "isSyncing": False,
                    "nickname": "test-hub",
                    "rootHash": "0xroot",
                    "dbStats": {"numMessages": 10, "numFidEvents": 2, "numFnameEvents": 1},
                    "peerId": "12D3KooW",
                    "hubOperatorFid": 1,
                },
            )
        )
        async with HubRestClient(HUB_URL) as client:
            info = await client.info.get_hub_info(include_db_stats=True)

        assert route.calls.last.request.url.params["dbstats"] == "true"
        assert info.db_stats.num_messages == 10
        assert info.hub_operator_fid == 1


@pytest.mark.asyncio
async def test_get_cast_by_id() -> None:
    """Cast lookup sends fid and hash and parses the cast."""
    with respx.mock:
        route = respx.get(url__startswith=f"{HUB_URL}/v1/castById").mock(
            return_value=httpx.Response(200, json=cast_json(text="gm"))
        )
        async with HubRestClient(HUB_URL) as client:
            cast = await client.casts.get_cast_by_id(CastId(fid=2, hash=CAST_HASH))

        params = route.calls.last.request.url.params
        assert params["fid"] == "2"
        assert params["hash"] == CAST_HASH
        assert cast is not None
        assert cast.data.cast_add_body.text == "gm"
        assert cast.hash_scheme == "HASH_SCHEME_BLAKE3"


@pytest.mark.asyncio
async def test_get_reaction_by_id_sends_numeric_type() -> None:
    """Reaction lookup sends the numeric reaction type and target."""
    with respx.mock:
        route = respx.get(url__startswith=f"{HUB_URL}/v1/reactionById").mock(
            return_value=httpx.Response(400, json=error_json("not_found"))
        )
        async with HubRestClient(HUB_URL) as client:
            reaction = await client.reactions.get_reaction_by_id(2, "like", CastId(fid=3, hash=CAST_HASH))

        params = route.calls.last.request.url.params
        assert params["reaction_type"] == "1"
        assert params["target_fid"] == "3"
        assert params["target_hash"] == CAST_HASH
        assert reaction is None


@pytest.mark.asyncio
async def test_get_specific_user_data_by_fid() -> None:
    """User data lookup sends the numeric user data type."""
    with respx.mock:
        route = respx.get(url__startswith=f"{HUB_URL}/v1/userDataByFid").mock(
            return_value=httpx.Response(
                200,
                json={
                    "data": {
                        "type": "MESSAGE_TYPE_USER_DATA_ADD",
                        "fid": 6833,
                        "timestamp": 83433831,
                        "network": "FARCASTER_NETWORK_MAINNET",
                        "userDataBody": {"type": "USER_DATA_TYPE_DISPLAY", "value": "Alice"},
                    },
                    "hash": "0x" + "01" * 20,
                    "hashScheme": "HASH_SCHEME_BLAKE3",
                    "signature": "c2ln",
                    "signatureScheme": "SIGNATURE_SCHEME_ED25519",
                    "signer": "0x" + "02" * 32,
                },
            )
        )
        async with HubRestClient(HUB_URL) as client:
            user_data = await client.user_data.get_specific_user_data_by_fid(6833, UserDataType.DISPLAY)

        assert route.calls.last.request.url.params["user_data_type"] == "2"
        assert user_data is not None
        assert user_data.data.user_data_body.value == "Alice"


@pytest.mark.asyncio
async def test_get_storage_limits_by_fid() -> None:
    """Storage limits are parsed per store type."""
    with respx.mock:
        respx.get(url__startswith=f"{HUB_URL}/v1/storageLimitsByFid").mock(
            return_value=httpx.Response(
                200,
                json={
                    "limits": [
                        {"storeType": "STORE_TYPE_CASTS", "limit": 10000},
                        {"storeType": "STORE_TYPE_LINKS", "limit": 5000},
                    ]
                },
            )
        )
        async with HubRestClient(HUB_URL) as client:
            limits = await client.storage.get_storage_limits_by_fid(3)

        assert [limit.store_type for limit in limits] == ["STORE_TYPE_CASTS", "STORE_TYPE_LINKS"]
        assert limits[0].limit == 10000


@pytest.mark.asyncio
async def test_username_proofs() -> None:
    """Username proofs can be fetched by name and by fid."""
    proof = {
        "timestamp": 1670603245,
        "name": "alice",
        "owner": "0x" + "aa" * 20,
        "signature": "0xsig",
        "fid": 6833,
        "type": "USERNAME_TYPE_FNAME",
    }
    with respx.mock:
        by_name = respx.get(url__startswith=f"{HUB_URL}/v1/userNameProofByName").mock(
            return_value=httpx.Response(200, json=proof)
        )
        respx.get(url__startswith=f"{HUB_URL}/v1/userNameProofsByFid").mock(
            return_value=httpx.Response(200, json={"proofs": [proof]})
        )
        async with HubRestClient(HUB_URL) as client:
            single = await client.usernames.get_username_proof("alice")
            proofs = await client.usernames.list_username_proofs_for_fid(6833)

        assert by_name.calls.last.request.url.params["name"] == "alice"
        assert single is not None and single.fid == 6833
        assert len(proofs) == 1


@pytest.mark.asyncio
async def test_validate_message_accepts_hex() -> None:
    """Hex-encoded messages are posted as raw bytes."""
    with respx.mock:
        route = respx.post(f"{HUB_URL}/v1/validateMessage").mock(
            return_value=httpx.Response(200, json={"valid": True, "message": cast_json()})
        )
        async with HubRestClient(HUB_URL) as client:
            result = await client.messages.validate_message("0x0a02")

        assert route.calls.last.request.content == b"\x0a\x02"
        assert result.valid
        assert result.message is not None


@pytest.mark.asyncio
async def test_validate_message_rejects_bad_hex_before_request() -> None:
    """Malformed hex fails before any request is sent."""
    with respx.mock:
        route = respx.post(f"{HUB_URL}/v1/validateMessage").mock(
            return_value=httpx.Response(200, json={"valid": True})
        )
        async with HubRestClient(HUB_URL) as client:
            with pytest.raises(HexDecodeError):
                await client.messages.validate_message("0xnothex")

        assert not route.called


# ============================================================
#  On-chain events
# ============================================================


@pytest.mark.asyncio
async def test_on_chain_events_projected_by_category() -> None:
    """On-chain events are parsed into the requested category's model."""
    with respx.mock:
        route = respx.get(url__startswith=f"{HUB_URL}/v1/onChainEventsByFid").mock(
            return_value=httpx.Response(200, json={"events": [signer_event_json(), signer_event_json()]})
        )
        async with HubRestClient(HUB_URL) as client:
            events = await client.on_chain_events.list_on_chain_events_by_fid(3, OnChainEventType.SIGNER)

        assert route.calls.last.request.url.params["event_type"] == "EVENT_TYPE_SIGNER"
        assert len(events) == 2
        assert all(isinstance(e, OnChainEventSigner) for e in events)
        assert events[0].signer_event_body.key_type == 1


@pytest.mark.asyncio
async def test_on_chain_event_of_other_category_fails_validation() -> None:
    """Events of a different category fail model validation."""
    with respx.mock:
        respx.get(url__startswith=f"{HUB_URL}/v1/onChainEventsByFid").mock(
            return_value=httpx.Response(200, json={"events": [signer_event_json()]})
        )
        async with HubRestClient(HUB_URL) as client:
            with pytest.raises(ValidationError):
                await client.on_chain_events.list_on_chain_events_by_fid(3, OnChainEventType.ID_REGISTER)


@pytest.mark.asyncio
async def test_id_registry_event_by_address() -> None:
    """ID registry lookup parses the event; a missing signer event is None."""
    event = {
        **signer_event_json(),
        "type": "EVENT_TYPE_ID_REGISTER",
        "idRegisterEventBody": {
            "to": "0x" + "44" * 20,
            "eventType": "ID_REGISTER_EVENT_TYPE_REGISTER",
            "from": "0x",
            "recoveryAddress": "0x" + "55" * 20,
        },
    }
    del event["signerEventBody"]
    with respx.mock:
        respx.get(url__startswith=f"{HUB_URL}/v1/onChainIdRegistryEventByAddress").mock(
            return_value=httpx.Response(200, json=event)
        )
        respx.get(url__startswith=f"{HUB_URL}/v1/onChainSignersByFid").mock(
            return_value=httpx.Response(404, json=error_json("not_found"))
        )
        async with HubRestClient(HUB_URL) as client:
            registered = await client.on_chain_events.get_on_chain_id_registry_event_by_address("0x" + "44" * 20)
            signer = await client.on_chain_events.get_on_chain_signer_event_by_signer(3, "0x" + "33" * 32)

        assert isinstance(registered, OnChainEventIdRegister)
        assert registered.id_register_event_body.recovery_address == "0x" + "55" * 20
        assert signer is None


# ============================================================
#  Single-item lookups
# ============================================================


NOT_FOUND_LOOKUPS = [
    ("/v1/castById", lambda c: c.casts.get_cast_by_id(CastId(fid=2, hash=CAST_HASH))),
    ("/v1/reactionById", lambda c: c.reactions.get_reaction_by_id(2, "like", CastId(fid=3, hash=CAST_HASH))),
    ("/v1/linkById", lambda c: c.links.get_link_by_id(2, 3)),
    ("/v1/userDataByFid", lambda c: c.user_data.get_specific_user_data_by_fid(2, UserDataType.BIO)),
    ("/v1/userNameProofByName", lambda c: c.usernames.get_username_proof("nobody")),
    ("/v1/onChainSignersByFid", lambda c: c.on_chain_events.get_on_chain_signer_event_by_signer(2, "0x" + "33" * 32)),
    (
        "/v1/onChainIdRegistryEventByAddress",
        lambda c: c.on_chain_events.get_on_chain_id_registry_event_by_address("0x" + "44" * 20),
    ),
    ("/v1/eventById", lambda c: c.hub_events.get_hub_event_by_id(99)),
]


@pytest.mark.asyncio
@pytest.mark.parametrize("path,lookup", NOT_FOUND_LOOKUPS, ids=[path for path, _ in NOT_FOUND_LOOKUPS])
async def test_single_item_lookup_not_found_returns_none(path, lookup) -> None:
    """Every single-item lookup maps a not_found error to None."""
    with respx.mock:
        route = respx.get(url__startswith=f"{HUB_URL}{path}").mock(
            return_value=httpx.Response(400, json=error_json("not_found"))
        )
        async with HubRestClient(HUB_URL) as client:
            result = await lookup(client)

        assert route.called
        assert result is None


@pytest.mark.asyncio
@pytest.mark.parametrize("path,lookup", NOT_FOUND_LOOKUPS, ids=[path for path, _ in NOT_FOUND_LOOKUPS])
async def test_single_item_lookup_other_error_propagates(path, lookup) -> None:
    """Single-item lookups only swallow not_found."""
    with respx.mock:
        respx.get(url__startswith=f"{HUB_URL}{path}").mock(
            return_value=httpx.Response(400, json=error_json("bad_request.validation_failure"))
        )
        async with HubRestClient(HUB_URL) as client:
            with pytest.raises(HubApiError):
                await lookup(client)


@pytest.mark.asyncio
async def test_get_link_by_id() -> None:
    """Link lookup sends fid, target fid and link type."""
    link = {
        **cast_json(),
        "data": {
            "type": "MESSAGE_TYPE_LINK_ADD",
            "fid": 2,
            "timestamp": 100000,
            "network": "FARCASTER_NETWORK_MAINNET",
            "linkBody": {"type": "follow", "targetFid": 3},
        },
    }
    with respx.mock:
        route = respx.get(url__startswith=f"{HUB_URL}/v1/linkById").mock(
            return_value=httpx.Response(200, json=link)
        )
        async with HubRestClient(HUB_URL) as client:
            result = await client.links.get_link_by_id(2, 3)

        params = route.calls.last.request.url.params
        assert dict(params) == {"fid": "2", "target_fid": "3", "link_type": "follow"}
        assert result is not None
        assert result.data.link_body.target_fid == 3


@pytest.mark.asyncio
async def test_get_hub_event_by_id() -> None:
    """Hub event lookup sends event_id and parses the event."""
    with respx.mock:
        route = respx.get(url__startswith=f"{HUB_URL}/v1/eventById").mock(
            return_value=httpx.Response(
                200,
                json={"type": "HUB_EVENT_TYPE_MERGE_MESSAGE", "id": 350909155450880, "mergeMessageBody": {}},
            )
        )
        async with HubRestClient(HUB_URL) as client:
            event = await client.hub_events.get_hub_event_by_id(350909155450880)

        assert route.calls.last.request.url.params["event_id"] == "350909155450880"
        assert event is not None
        assert event.type == "HUB_EVENT_TYPE_MERGE_MESSAGE"
        assert event.merge_message_body == {}


# ============================================================
#  Listings
# ============================================================


LISTINGS = [
    ("/v1/castsByMention", lambda c: c.casts.list_casts_by_mention(5), {"fid": "5"}),
    (
        "/v1/castsByParent",
        lambda c: c.casts.list_casts_by_parent(CastId(fid=3, hash=CAST_HASH)),
        {"fid": "3", "hash": CAST_HASH},
    ),
    (
        "/v1/castsByParent",
        lambda c: c.casts.list_casts_by_parent("https://example.com"),
        {"url": "https://example.com"},
    ),
    ("/v1/reactionsByFid", lambda c: c.reactions.list_reactions_by_fid(2, "like"), {"fid": "2", "reaction_type": "1"}),
    (
        "/v1/reactionsByCast",
        lambda c: c.reactions.list_reactions_by_cast(CastId(fid=3, hash=CAST_HASH), "recast"),
        {"target_fid": "3", "target_hash": CAST_HASH, "reaction_type": "2"},
    ),
    (
        "/v1/reactionsByTarget",
        lambda c: c.reactions.list_reactions_by_target("https://example.com", ReactionType.LIKE),
        {"url": "https://example.com", "reaction_type": "1"},
    ),
    ("/v1/linksByFid", lambda c: c.links.list_links_by_fid(2), {"fid": "2", "link_type": "follow"}),
    (
        "/v1/linksByTargetFid",
        lambda c: c.links.list_links_by_target_fid(9),
        {"target_fid": "9", "link_type": "follow"},
    ),
    ("/v1/userDataByFid", lambda c: c.user_data.list_all_user_data_by_fid(6), {"fid": "6"}),
]


@pytest.mark.asyncio
@pytest.mark.parametrize("path,listing,expected", LISTINGS, ids=[path for path, _, _ in LISTINGS])
async def test_listing_sends_path_and_params(path, listing, expected) -> None:
    """Each listing hits its endpoint with the hub's query parameter names."""
    with respx.mock:
        route = respx.get(url__startswith=f"{HUB_URL}{path}").mock(
            return_value=httpx.Response(200, json={"messages": [], "nextPageToken": ""})
        )
        async with HubRestClient(HUB_URL) as client:
            items = await collect(listing(client))

        assert items == []
        assert route.call_count == 1
        params = dict(route.calls.last.request.url.params)
        assert {k: params.get(k) for k in expected} == expected


# ============================================================
#  Classifying errors from plain httpx
# ============================================================


def plain_status_error(body: dict) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", f"{HUB_URL}/v1/castById")
    response = httpx.Response(400, json=body, request=request)
    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        response.raise_for_status()
    return exc_info.value


def test_plain_status_error_with_err_code_is_api_error() -> None:
    """A caller's own HTTPStatusError is classified by its errCode body."""
    error = plain_status_error({"errCode": "not_found"})

    assert not isinstance(error, HubApiError)
    assert is_api_error_response(error)
    assert api_error_code(error) == "not_found"


def test_plain_status_error_without_err_code_is_not_api_error() -> None:
    """A status error whose body lacks errCode is unstructured."""
    error = plain_status_error({"message": "nope"})

    assert not is_api_error_response(error)
    assert api_error_code(error) is None
    assert not is_api_error_response(ValueError("not an http error"))


@pytest.mark.asyncio
async def test_not_found_as_none_handles_plain_status_error() -> None:
    """not_found_as_none also maps a plain httpx not_found error to None."""

    async def fails(body: dict) -> dict:
        raise plain_status_error(body)

    assert await not_found_as_none(fails({"errCode": "not_found"})) is None
    with pytest.raises(httpx.HTTPStatusError):
        await not_found_as_none(fails({"errCode": "bad_request"}))
