"""
Tests for the standalone verification command
"""

import pytest
from unittest.mock import AsyncMock, patch

from blockchain.verifier import ContractVerifier
from scripts import verify_contract
from conftest import DEV_ADDRESS

CONTRACT_ADDRESS = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"


def test_verifies_without_private_key(monkeypatch, artifacts_dir, capsys):
    """Only the explorer key is needed"""
    monkeypatch.delenv('PRIVATE_KEY', raising=False)
    monkeypatch.setenv('ARBISCAN_API_KEY', 'EXPLORERKEY')

    url = f"https://sepolia.arbiscan.io/address/{CONTRACT_ADDRESS}#code"
    with patch.object(ContractVerifier, 'verify', new=AsyncMock(return_value=url)) as verify:
        code = verify_contract.main([
            '--network', 'arbitrumSepolia', '--artifacts', artifacts_dir,
            CONTRACT_ADDRESS, DEV_ADDRESS.lower()
        ])

    assert code == 0
    assert capsys.readouterr().out.strip() == url
    args = verify.await_args.args
    assert args[0] == CONTRACT_ADDRESS
    assert args[3] == (DEV_ADDRESS,)


def test_missing_api_key(monkeypatch, artifacts_dir, capsys):
    monkeypatch.delenv('ARBISCAN_API_KEY', raising=False)

    code = verify_contract.main([
        '--network', 'arbitrumSepolia', '--artifacts', artifacts_dir, CONTRACT_ADDRESS, DEV_ADDRESS
    ])

    assert code == 1
    assert "ARBISCAN_API_KEY" in capsys.readouterr().err


def test_network_without_explorer(artifacts_dir, capsys):
    code = verify_contract.main([
        '--network', 'localhost', '--artifacts', artifacts_dir, CONTRACT_ADDRESS, DEV_ADDRESS
    ])

    assert code == 1
    assert "No block explorer" in capsys.readouterr().err


@pytest.mark.parametrize("address", ["0x1234", "0x9EA105F2F0954B3481D894B66E124E0A6084a52e0"])
def test_invalid_contract_address(monkeypatch, artifacts_dir, address, capsys):
    monkeypatch.setenv('ARBISCAN_API_KEY', 'EXPLORERKEY')

    code = verify_contract.main([
        '--network', 'arbitrumSepolia', '--artifacts', artifacts_dir, address, DEV_ADDRESS
    ])

    assert code == 1
    assert "not a valid address" in capsys.readouterr().err
