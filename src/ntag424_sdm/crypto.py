"""
AES-128 CMAC (RFC 4493 / NIST SP 800-38B) 구현.

SDM 세션 키 파생과 SUN MAC 검증에 사용됩니다. 블록 암호 자체는
pycryptodome의 AES-ECB(패딩 없음)를 사용하고, 서브키 생성과
CBC-MAC 체이닝은 태그와 비트 단위로 일치하도록 직접 계산합니다.
"""

from typing import NamedTuple

from Crypto.Cipher import AES

from .constants import (
    BLOCK_SIZE, KEY_SIZE, CMAC_SIZE,
    CMAC_RB, CMAC_PADDING_BYTE,
)


# ─── 바이트 연산 ────────────────────────────────────────────────────────────

def xor(bytes1: bytes, bytes2: bytes) -> bytes:
    """두 바이트열을 XOR 합니다. 짧은 쪽은 0으로 채운 것으로 간주합니다."""
    length = max(len(bytes1), len(bytes2))
    result = bytearray(length)
    for i in range(length):
        a = bytes1[i] if i < len(bytes1) else 0
        b = bytes2[i] if i < len(bytes2) else 0
        result[i] = a ^ b
    return bytes(result)


def shift_left(data: bytes) -> bytes:
    """바이트열 전체를 하나의 빅엔디언 정수로 보고 1비트 왼쪽으로 이동합니다."""
    result = bytearray(len(data))
    overflow = 0
    for i in range(len(data) - 1, -1, -1):
        result[i] = ((data[i] << 1) & 0xFF) | overflow
        overflow = (data[i] & 0x80) >> 7
    return bytes(result)


# ─── CMAC ───────────────────────────────────────────────────────────────────

class Subkeys(NamedTuple):
    """CMAC 서브키 K1, K2."""
    k1: bytes
    k2: bytes


def _check_key(key: bytes) -> bytes:
    if len(key) != KEY_SIZE:
        raise ValueError(f"AES-128 key must be {KEY_SIZE} bytes, got {len(key)}")
    return bytes(key)


def _new_ecb(key: bytes):
    return AES.new(_check_key(key), AES.MODE_ECB)


def generate_subkeys(key: bytes) -> Subkeys:
    """
    CMAC 서브키 K1, K2를 생성합니다.

    L = AES(key, 0^128)
    K1 = L << 1 (MSB가 1이면 Rb XOR)
    K2 = K1 << 1 (MSB가 1이면 Rb XOR)
    """
    l = _new_ecb(key).encrypt(bytes(BLOCK_SIZE))

    k1 = shift_left(l)
    if l[0] & 0x80:
        k1 = xor(k1, CMAC_RB)

    k2 = shift_left(k1)
    if k1[0] & 0x80:
        k2 = xor(k2, CMAC_RB)

    return Subkeys(k1, k2)


def calculate_cmac(key: bytes, data: bytes) -> bytes:
    """
    AES-128 CMAC을 계산합니다 (16바이트 전체 MAC).

    Args:
        key (bytes): 16바이트 AES 키
        data (bytes): MAC 대상 데이터 (빈 값 허용)

    Returns:
        bytes: 16바이트 CMAC
    """
    k1, k2 = generate_subkeys(key)
    cipher = _new_ecb(key)
    data = bytes(data)

    n = 1 if not data else (len(data) + BLOCK_SIZE - 1) // BLOCK_SIZE
    last_block_complete = len(data) > 0 and len(data) % BLOCK_SIZE == 0

    start = (n - 1) * BLOCK_SIZE
    if last_block_complete:
        m_last = xor(data[start:start + BLOCK_SIZE], k1)
    else:
        rem = data[start:]
        padded = rem + bytes([CMAC_PADDING_BYTE]) + bytes(BLOCK_SIZE - len(rem) - 1)
        m_last = xor(padded, k2)

    x = bytes(BLOCK_SIZE)
    for i in range(n - 1):
        block = data[i * BLOCK_SIZE:(i + 1) * BLOCK_SIZE]
        x = cipher.encrypt(xor(x, block))

    return cipher.encrypt(xor(x, m_last))


def truncate_cmac(cmac: bytes) -> bytes:
    """전체 CMAC에서 홀수 인덱스 바이트(1, 3, ..., 15)만 추출하여 8바이트로 자릅니다."""
    if len(cmac) != CMAC_SIZE:
        raise ValueError(f"CMAC must be {CMAC_SIZE} bytes, got {len(cmac)}")
    return bytes(cmac[1::2])
