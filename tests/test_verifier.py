"""
Unit Tests for Block Explorer Verification
"""

import json
import aiohttp
import pytest
from unittest.mock import AsyncMock, Mock, patch

from blockchain.contract_manager import ContractManager
from blockchain.verifier import ContractVerifier, abi_type, encode_constructor_args
from utils.exceptions import VerificationError
from utils.settings import ExplorerConfig
from conftest import DEV_ADDRESS

CONTRACT_ADDRESS = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"


@pytest.fixture
def explorer():
    return ExplorerConfig(
        api_url="https://api-sepolia.arbiscan.io/api",
        browser_url="https://sepolia.arbiscan.io",
        api_key="EXPLORERKEY",
        api_key_env="ARBISCAN_API_KEY"
    )


@pytest.fixture
def verifier(explorer):
    return ContractVerifier(explorer, poll_interval=0, max_polls=3, submit_attempts=2)


@pytest.fixture
def compiled(artifacts_dir):
    manager = ContractManager(artifacts_dir)
    artifact = manager.load_artifact("ZeroxBin")
    return artifact, manager.load_build_info(artifact)


def not_verified():
    return {'status': '1', 'message': 'OK', 'result': [{'SourceCode': '', 'ABI': 'Contract source code not verified'}]}


class FakeResponse:
    """aiohttp response usable as an async context manager"""

    def __init__(self, status, payload=None):
        self.status = status
        self.json = AsyncMock(return_value=payload)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


class TestEncoding:
    """Test constructor argument encoding"""

    def test_address_argument(self):
        encoded = encode_constructor_args([{'type': 'address'}], [DEV_ADDRESS])

        assert encoded == '0' * 24 + DEV_ADDRESS[2:].lower()

    def test_no_arguments(self):
        assert encode_constructor_args([], []) == ""

    def test_tuple_type(self):
        abi_input = {
            'type': 'tuple[]',
            'components': [{'type': 'address'}, {'type': 'uint256'}]
        }

        assert abi_type(abi_input) == '(address,uint256)[]'


class TestPayload:
    """Test verifysourcecode form data"""

    def test_payload_fields(self, verifier, compiled):
        artifact, build_info = compiled

        payload = verifier.build_payload(CONTRACT_ADDRESS, artifact, build_info, [DEV_ADDRESS])

        assert payload['apikey'] == 'EXPLORERKEY'
        assert payload['action'] == 'verifysourcecode'
        assert payload['contractaddress'] == CONTRACT_ADDRESS
        assert payload['codeformat'] == 'solidity-standard-json-input'
        assert payload['contractname'] == 'contracts/ZeroxBin.sol:ZeroxBin'
        assert payload['compilerversion'] == 'v0.8.27+commit.40a35a09'
        assert json.loads(payload['sourceCode']) == build_info['input']
        assert payload['constructorArguements'].endswith(DEV_ADDRESS[2:].lower())

    def test_contract_url(self, verifier):
        assert verifier.contract_url(CONTRACT_ADDRESS) == (
            f"https://sepolia.arbiscan.io/address/{CONTRACT_ADDRESS}#code"
        )

    def test_missing_api_key(self, explorer):
        explorer = ExplorerConfig(explorer.api_url, explorer.browser_url, None, "ARBISCAN_API_KEY")

        with pytest.raises(VerificationError, match="ARBISCAN_API_KEY"):
            ContractVerifier(explorer)


class TestVerify:
    """Test the submit and poll flow"""

    @pytest.mark.asyncio
    async def test_verified_after_pending(self, verifier, compiled):
        artifact, build_info = compiled
        verifier._request = AsyncMock(side_effect=[
            not_verified(),
            {'status': '1', 'message': 'OK', 'result': 'guid-123'},
            {'status': '0', 'message': 'NOTOK', 'result': 'Pending in queue'},
            {'status': '1', 'message': 'OK', 'result': 'Pass - Verified'},
        ])

        url = await verifier.verify(CONTRACT_ADDRESS, artifact, build_info, [DEV_ADDRESS])

        assert url.endswith(f"/address/{CONTRACT_ADDRESS}#code")
        assert verifier._request.await_count == 4

        status_call = verifier._request.await_args_list[3]
        assert status_call.args[2]['guid'] == 'guid-123'

    @pytest.mark.asyncio
    async def test_already_verified_skips_submission(self, verifier, compiled):
        artifact, build_info = compiled
        verifier._request = AsyncMock(return_value={
            'status': '1', 'result': [{'SourceCode': 'pragma solidity 0.8.27;'}]
        })

        await verifier.verify(CONTRACT_ADDRESS, artifact, build_info, [DEV_ADDRESS])

        assert verifier._request.await_count == 1

    @pytest.mark.asyncio
    async def test_submit_reports_already_verified(self, verifier, compiled):
        artifact, build_info = compiled
        verifier._request = AsyncMock(side_effect=[
            not_verified(),
            {'status': '0', 'message': 'NOTOK', 'result': 'Contract source code already verified'},
        ])

        await verifier.verify(CONTRACT_ADDRESS, artifact, build_info, [DEV_ADDRESS])

        assert verifier._request.await_count == 2

    @pytest.mark.asyncio
    async def test_waits_for_bytecode_indexing(self, verifier, compiled):
        artifact, build_info = compiled
        verifier._request = AsyncMock(side_effect=[
            not_verified(),
            {'status': '0', 'result': f'Unable to locate ContractCode at {CONTRACT_ADDRESS}'},
            {'status': '1', 'result': 'guid-9'},
            {'status': '1', 'result': 'Pass - Verified'},
        ])

        await verifier.verify(CONTRACT_ADDRESS, artifact, build_info, [DEV_ADDRESS])

        assert verifier._request.await_count == 4

    @pytest.mark.asyncio
    async def test_verification_failure(self, verifier, compiled):
        artifact, build_info = compiled
        verifier._request = AsyncMock(side_effect=[
            not_verified(),
            {'status': '1', 'result': 'guid-1'},
            {'status': '0', 'result': 'Fail - Unable to verify'},
        ])

        with pytest.raises(VerificationError, match="Fail - Unable to verify"):
            await verifier.verify(CONTRACT_ADDRESS, artifact, build_info, [DEV_ADDRESS])

    @pytest.mark.asyncio
    async def test_submission_rejected(self, verifier, compiled):
        artifact, build_info = compiled
        verifier._request = AsyncMock(side_effect=[
            not_verified(),
            {'status': '0', 'result': 'Invalid API Key'},
        ])

        with pytest.raises(VerificationError, match="Invalid API Key"):
            await verifier.verify(CONTRACT_ADDRESS, artifact, build_info, [DEV_ADDRESS])

    @pytest.mark.asyncio
    async def test_pending_forever(self, verifier, compiled):
        artifact, build_info = compiled
        pending = {'status': '0', 'result': 'Pending in queue'}
        verifier._request = AsyncMock(side_effect=[
            not_verified(),
            {'status': '1', 'result': 'guid-2'},
            pending, pending, pending,
        ])

        with pytest.raises(VerificationError, match="still pending"):
            await verifier.verify(CONTRACT_ADDRESS, artifact, build_info, [DEV_ADDRESS])


class TestHttp:
    """Test the explorer HTTP requests"""

    @pytest.mark.asyncio
    async def test_request_form(self, verifier, compiled):
        artifact, build_info = compiled
        get = Mock(side_effect=[
            FakeResponse(200, not_verified()),
            FakeResponse(200, {'status': '1', 'result': 'Pass - Verified'}),
        ])
        post = Mock(return_value=FakeResponse(200, {'status': '1', 'result': 'guid-7'}))

        with patch.object(aiohttp.ClientSession, 'get', get), \
                patch.object(aiohttp.ClientSession, 'post', post):
            await verifier.verify(CONTRACT_ADDRESS, artifact, build_info, [DEV_ADDRESS])

        lookup, status = get.call_args_list
        assert lookup.args == ("https://api-sepolia.arbiscan.io/api",)
        assert lookup.kwargs['params'] == {
            'module': 'contract',
            'action': 'getsourcecode',
            'address': CONTRACT_ADDRESS,
            'apikey': 'EXPLORERKEY',
        }
        assert isinstance(lookup.kwargs['timeout'], aiohttp.ClientTimeout)
        assert lookup.kwargs['timeout'].total == 30.0
        assert status.kwargs['params']['guid'] == 'guid-7'
        assert status.kwargs['params']['apikey'] == 'EXPLORERKEY'

        post.assert_called_once()
        submit = post.call_args
        assert submit.args == ("https://api-sepolia.arbiscan.io/api",)
        assert 'params' not in submit.kwargs
        assert submit.kwargs['data']['action'] == 'verifysourcecode'
        assert submit.kwargs['data']['apikey'] == 'EXPLORERKEY'

    @pytest.mark.asyncio
    async def test_get_params_not_mutated(self, verifier):
        get = Mock(return_value=FakeResponse(200, {'status': '1', 'result': []}))
        params = {'module': 'contract', 'action': 'getsourcecode', 'address': CONTRACT_ADDRESS}

        with patch.object(aiohttp.ClientSession, 'get', get):
            async with aiohttp.ClientSession() as session:
                data = await verifier._request(session, 'GET', params)

        assert data == {'status': '1', 'result': []}
        assert 'apikey' not in params

    @pytest.mark.asyncio
    async def test_server_error_on_lookup(self, verifier, compiled):
        artifact, build_info = compiled
        get = Mock(return_value=FakeResponse(500))
        post = Mock()

        with patch.object(aiohttp.ClientSession, 'get', get), \
                patch.object(aiohttp.ClientSession, 'post', post):
            with pytest.raises(VerificationError, match="HTTP 500 for getsourcecode"):
                await verifier.verify(CONTRACT_ADDRESS, artifact, build_info, [DEV_ADDRESS])

        post.assert_not_called()

    @pytest.mark.asyncio
    async def test_server_error_on_submit(self, verifier, compiled):
        artifact, build_info = compiled
        get = Mock(return_value=FakeResponse(200, not_verified()))
        post = Mock(return_value=FakeResponse(502))

        with patch.object(aiohttp.ClientSession, 'get', get), \
                patch.object(aiohttp.ClientSession, 'post', post):
            with pytest.raises(VerificationError, match="HTTP 502 for verifysourcecode"):
                await verifier.verify(CONTRACT_ADDRESS, artifact, build_info, [DEV_ADDRESS])

        get.assert_called_once()
