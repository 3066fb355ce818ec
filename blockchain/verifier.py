"""
Contract Verifier
Publishes contract sources to an Etherscan-compatible block explorer (Arbiscan)
"""

import asyncio
import json
import aiohttp
from typing import Any, Dict, List, Sequence
from eth_abi import encode
from loguru import logger

from utils.exceptions import VerificationError
from utils.settings import ExplorerConfig
from .models import ContractArtifact

STATUS_PENDING = "Pending in queue"
STATUS_PASS = "Pass - Verified"
ALREADY_VERIFIED = "already verified"
CODE_NOT_INDEXED = "Unable to locate ContractCode"


def abi_type(abi_input: Dict[str, Any]) -> str:
    """Canonical ABI type string, expanding tuple components"""
    type_str = abi_input['type']

    if type_str.startswith('tuple'):
        suffix = type_str[len('tuple'):]
        components = ','.join(abi_type(c) for c in abi_input.get('components', []))
        return f"({components}){suffix}"

    return type_str


def encode_constructor_args(inputs: List[Dict[str, Any]], args: Sequence) -> str:
    """
    ABI-encode constructor arguments as explorers expect them

    Returns:
        Hex string without 0x prefix (empty for no arguments)
    """
    if not inputs:
        return ""
    return encode([abi_type(i) for i in inputs], list(args)).hex()


class ContractVerifier:
    """
    Submits standard-JSON sources and polls the verification result
    """

    def __init__(
        self,
        explorer: ExplorerConfig,
        poll_interval: float = 5.0,
        max_polls: int = 30,
        submit_attempts: int = 5,
        request_timeout: float = 30.0
    ):
        """
        Initialize Contract Verifier

        Args:
            explorer: Explorer endpoints and API key
            poll_interval: Seconds between status checks
            max_polls: Status checks before giving up
            submit_attempts: Submissions while the explorer has not indexed the bytecode
            request_timeout: HTTP timeout per request in seconds
        """
        if not explorer.api_key:
            raise VerificationError(
                f"{explorer.api_key_env or 'Explorer API key'} must be set to verify contracts"
            )

        self.explorer = explorer
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self.submit_attempts = submit_attempts
        self.request_timeout = request_timeout

    def contract_url(self, contract_address: str) -> str:
        return f"{self.explorer.browser_url.rstrip('/')}/address/{contract_address}#code"

    def build_payload(
        self,
        contract_address: str,
        artifact: ContractArtifact,
        build_info: Dict,
        constructor_args: Sequence
    ) -> Dict[str, str]:
        """
        Form data for the verifysourcecode action

        Args:
            contract_address: Deployed address
            artifact: Artifact the instance was created from
            build_info: solc build-info containing the artifact
            constructor_args: Arguments the instance was created with

        Returns:
            Form fields
        """
        return {
            'apikey': self.explorer.api_key,
            'module': 'contract',
            'action': 'verifysourcecode',
            'contractaddress': contract_address,
            'sourceCode': json.dumps(build_info['input']),
            'codeformat': 'solidity-standard-json-input',
            'contractname': artifact.fully_qualified_name,
            'compilerversion': f"v{build_info['solcLongVersion']}",
            # Misspelling is part of the Etherscan API
            'constructorArguements': encode_constructor_args(
                artifact.constructor_inputs, constructor_args
            ),
        }

    async def verify(
        self,
        contract_address: str,
        artifact: ContractArtifact,
        build_info: Dict,
        constructor_args: Sequence
    ) -> str:
        """
        Verify a deployed contract

        Returns:
            Explorer URL of the verified source
        """
        url = self.contract_url(contract_address)

        async with aiohttp.ClientSession() as session:
            if await self._is_verified(session, contract_address):
                logger.info(f"{contract_address} is already verified: {url}")
                return url

            payload = self.build_payload(contract_address, artifact, build_info, constructor_args)
            guid = await self._submit(session, payload)

            if guid is None:
                logger.info(f"{contract_address} is already verified: {url}")
                return url

            await self._wait_for_result(session, guid)

        logger.success(f"Verified {artifact.fully_qualified_name}: {url}")
        return url

    async def _is_verified(self, session: aiohttp.ClientSession, contract_address: str) -> bool:
        data = await self._request(session, 'GET', {
            'module': 'contract',
            'action': 'getsourcecode',
            'address': contract_address,
        })

        result = data.get('result')
        if data.get('status') != '1' or not isinstance(result, list) or not result:
            return False

        return bool(result[0].get('SourceCode'))

    async def _submit(self, session: aiohttp.ClientSession, payload: Dict[str, str]):
        """Submit sources, returning the status GUID (None if already verified)"""
        for attempt in range(1, self.submit_attempts + 1):
            data = await self._request(session, 'POST', payload)
            result = str(data.get('result', ''))

            if data.get('status') == '1':
                logger.info(f"Verification submitted (guid: {result})")
                return result

            if ALREADY_VERIFIED in result.lower():
                return None

            if CODE_NOT_INDEXED in result and attempt < self.submit_attempts:
                logger.debug(f"Explorer has not indexed the bytecode yet ({attempt}/{self.submit_attempts})")
                await asyncio.sleep(self.poll_interval)
                continue

            raise VerificationError(f"Verification request rejected: {result}")

        raise VerificationError("Explorer never indexed the contract bytecode")

    async def _wait_for_result(self, session: aiohttp.ClientSession, guid: str):
        for _ in range(self.max_polls):
            data = await self._request(session, 'GET', {
                'module': 'contract',
                'action': 'checkverifystatus',
                'guid': guid,
            })
            result = str(data.get('result', ''))

            if result == STATUS_PENDING:
                await asyncio.sleep(self.poll_interval)
                continue

            if result == STATUS_PASS or ALREADY_VERIFIED in result.lower():
                return

            raise VerificationError(f"Verification failed: {result}")

        raise VerificationError(f"Verification still pending after {self.max_polls} checks (guid: {guid})")

    async def _request(
        self,
        session: aiohttp.ClientSession,
        method: str,
        params: Dict[str, str]
    ) -> Dict:
        timeout = aiohttp.ClientTimeout(total=self.request_timeout)

        if method == 'GET':
            params = dict(params, apikey=self.explorer.api_key)
            request = session.get(self.explorer.api_url, params=params, timeout=timeout)
        else:
            request = session.post(self.explorer.api_url, data=params, timeout=timeout)

        async with request as response:
            if response.status != 200:
                raise VerificationError(
                    f"Explorer API returned HTTP {response.status} for {params.get('action')}"
                )
            return await response.json(content_type=None)
