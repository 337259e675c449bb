"""
NTAG 424 DNA Secure Dynamic Messaging (SDM) 처리.

태그가 URL에 미러링하는 암호화된 PICCData를 복호화하여 UID와 SDMReadCtr를
추출하고, 이를 바탕으로 SDM 세션 키(SesSDMFileReadMACKey 등)를 파생합니다.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from Crypto.Cipher import AES

from .constants import (
    BLOCK_SIZE, KEY_SIZE, UID_SIZE, COUNTER_SIZE, MAX_READ_COUNTER,
    MIN_PICC_PLAINTEXT, MIN_TAGGED_PICC_PLAINTEXT,
    SESSION_ENC_KEY_PURPOSE, SESSION_MAC_KEY_PURPOSE, SESSION_VECTOR_HEADER,
)
from .crypto import calculate_cmac

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UidAndCounter:
    """복호화된 PICCData에서 추출한 UID(7바이트)와 읽기 카운터(3바이트, LSB first)."""

    uid: bytes
    counter: bytes

    def __post_init__(self):
        if len(self.uid) != UID_SIZE:
            raise ValueError(f"UID must be {UID_SIZE} bytes, got {len(self.uid)}")
        if len(self.counter) != COUNTER_SIZE:
            raise ValueError(
                f"Read counter must be {COUNTER_SIZE} bytes, got {len(self.counter)}"
            )

    @property
    def uid_hex(self) -> str:
        return self.uid.hex().upper()

    @property
    def counter_int(self) -> int:
        return int.from_bytes(self.counter, "little")


@dataclass(frozen=True)
class SdmSessionVectorOptions:
    """MAC 세션 벡터에 포함할 미러링 항목 (SDMOptions의 UID/SDMReadCtr 비트)."""

    uid_mirroring: bool = True
    read_counter: bool = True


DEFAULT_SESSION_VECTOR_OPTIONS = SdmSessionVectorOptions()


# ─── PICCData ───────────────────────────────────────────────────────────────

def decrypt_picc_data(picc_data: bytes, sdm_key: bytes) -> Tuple[Optional[bytes], Optional[str]]:
    """
    SDMMetaReadKey로 PICCData를 복호화합니다 (AES-ECB, 패딩 없음).

    Args:
        picc_data (bytes): 암호화된 PICCData (16바이트 배수)
        sdm_key (bytes): 16바이트 SDM 키

    Returns:
        성공 시 (평문, None), 실패 시 (None, 에러 메시지)
    """
    if not picc_data or len(picc_data) % BLOCK_SIZE:
        error = f"PICC data must be a positive multiple of {BLOCK_SIZE} bytes, got {len(picc_data)}"
        logger.warning("PICC data decryption failed: %s", error)
        return None, error

    if len(sdm_key) != KEY_SIZE:
        error = f"SDM key must be {KEY_SIZE} bytes, got {len(sdm_key)}"
        logger.warning("PICC data decryption failed: %s", error)
        return None, error

    try:
        cipher = AES.new(bytes(sdm_key), AES.MODE_ECB)
        return cipher.decrypt(bytes(picc_data)), None
    except ValueError as e:
        logger.warning("PICC data decryption failed: %s", e)
        return None, str(e)


def extract_uid_and_counter(decrypted: bytes) -> Optional[UidAndCounter]:
    """
    복호화된 PICCData에서 UID와 카운터를 추출합니다.

    11바이트 이상: PICCDataTag(1) + UID(7) + SDMReadCtr(3) + ...
    10바이트:      UID(7) + SDMReadCtr(3)

    길이만으로 포맷을 구분하므로, 태그 바이트가 있는 10바이트 데이터는
    태그 바이트가 없는 포맷으로 해석됩니다.
    """
    if not decrypted or len(decrypted) < MIN_PICC_PLAINTEXT:
        return None

    decrypted = bytes(decrypted)
    if len(decrypted) >= MIN_TAGGED_PICC_PLAINTEXT:
        # 첫 바이트는 PICCDataTag (예: 0xC7)
        return UidAndCounter(uid=decrypted[1:8], counter=decrypted[8:11])
    return UidAndCounter(uid=decrypted[0:7], counter=decrypted[7:10])


# ─── 세션 키 파생 ───────────────────────────────────────────────────────────

def generate_sdm_session_vector(
    purpose: bytes,
    uid: bytes,
    read_ctr: int,
    options: Optional[SdmSessionVectorOptions] = None,
) -> bytes:
    """
    SDM 세션 벡터(SV1/SV2)를 생성합니다.

    SV = Purpose(2) || 00 01 00 80 || [UID(7)] || [SDMReadCtr(3, LSB first)]

    암호화 키 목적(C3 3C)은 항상 UID와 카운터를 포함하고, MAC 키 목적(3C C3)은
    options에 따라 포함 여부가 결정됩니다. 그 밖의 목적 값은 헤더만 반환합니다.
    """
    if options is None:
        options = DEFAULT_SESSION_VECTOR_OPTIONS
    if len(purpose) != 2:
        raise ValueError(f"Purpose must be 2 bytes, got {len(purpose)}")
    if len(uid) != UID_SIZE:
        raise ValueError(f"UID must be {UID_SIZE} bytes, got {len(uid)}")
    if not 0 <= read_ctr <= MAX_READ_COUNTER:
        raise ValueError(f"Read counter out of range: {read_ctr}")

    purpose = bytes(purpose)
    uid = bytes(uid)
    rc = read_ctr.to_bytes(COUNTER_SIZE, "big")[::-1]

    vec = purpose + SESSION_VECTOR_HEADER
    if purpose == SESSION_ENC_KEY_PURPOSE:
        vec += uid + rc
    elif purpose == SESSION_MAC_KEY_PURPOSE:
        if options.uid_mirroring:
            vec += uid
        if options.read_counter:
            vec += rc
    return vec


def generate_sdm_session_key(
    file_read_key: bytes,
    purpose: bytes,
    uid: bytes,
    read_ctr: int,
    options: Optional[SdmSessionVectorOptions] = None,
) -> bytes:
    """
    SDM 세션 키를 파생합니다: CMAC(file_read_key, SV).

    세션 벡터가 16바이트보다 짧으면 0x00으로 16바이트까지 채웁니다.
    """
    sv = generate_sdm_session_vector(purpose, uid, read_ctr, options)
    if len(sv) < BLOCK_SIZE:
        sv = sv + bytes(BLOCK_SIZE - len(sv))

    logger.debug("SDM session vector: purpose=%s length=%d", purpose.hex().upper(), len(sv))
    return calculate_cmac(file_read_key, sv)
