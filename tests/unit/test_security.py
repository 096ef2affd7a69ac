"""
Unit tests for log masking helpers.
"""

from boostx.utils.security import mask_address, mask_tx_hash


def test_mask_address():
    assert mask_address("0x1234567890abcdef1234567890abcdef12345678") == "0x1234...5678"


def test_mask_address_empty():
    assert mask_address(None) == "***"
    assert mask_address("0x12") == "***"


def test_mask_tx_hash():
    assert mask_tx_hash("0x" + "ab" * 32) == "0xabababab...ababab"
    assert mask_tx_hash("0xabc") == "***"
