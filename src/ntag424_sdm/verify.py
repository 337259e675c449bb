"""
SUN(Secure Unique NFC) 메시지 검증.

태그 URL의 PICCData와 SDMMAC을 받아 UID/카운터를 복원하고, 세션 MAC 키를
파생해 계산한 CMAC과 태그가 보낸 CMAC을 비교합니다.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config import parse_hex, resolve_sdm_key_hex
from .constants import (
    SESSION_MAC_KEY_PURPOSE, VERIFY_METHOD_FULL_MIRRORING,
    ERR_DECRYPTION_FAILED, ERR_EXTRACTION_FAILED,
)
from .crypto import calculate_cmac, truncate_cmac
from .exceptions import NtagError, DecryptionError, ExtractionError
from .sdm import (
    SdmSessionVectorOptions, decrypt_picc_data, extract_uid_and_counter,
    generate_sdm_session_key,
)

logger = logging.getLogger(__name__)

FULL_MIRRORING = SdmSessionVectorOptions(uid_mirroring=True, read_counter=True)


@dataclass(frozen=True)
class AuthResult:
    """SDM 인증 결과."""

    success: bool
    uid: Optional[str] = None
    counter: Optional[int] = None
    method: Optional[str] = None
    calculated_cmac: Optional[str] = None
    provided_cmac: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "uid": self.uid,
            "counter": self.counter,
            "method": self.method,
            "calculatedCmac": self.calculated_cmac,
            "providedCmac": self.provided_cmac,
            "error": self.error,
        }


def verify_sdm_auth(
    picc_data_hex: str,
    provided_cmac_hex: str,
    sdm_key_hex: Optional[str] = None,
) -> AuthResult:
    """
    SDM 인증을 검증합니다.

    Args:
        picc_data_hex (str): 암호화된 PICCData (hex)
        provided_cmac_hex (str): 태그가 생성한 8바이트 CMAC (hex)
        sdm_key_hex (str): SDM 키 (hex). 없으면 NTAG424_SDM_KEY 환경 변수 사용

    Returns:
        AuthResult: CMAC 불일치는 에러가 아니라 success=False 결과로 반환됩니다.
    """
    provided_cmac = provided_cmac_hex.strip().upper()

    try:
        sdm_key = parse_hex(resolve_sdm_key_hex(sdm_key_hex), "SDM key")
        picc_data = parse_hex(picc_data_hex, "PICC data")

        # 1단계: PICCData 복호화
        decrypted, _ = decrypt_picc_data(picc_data, sdm_key)
        if decrypted is None:
            raise DecryptionError(ERR_DECRYPTION_FAILED)

        # 2단계: UID 및 카운터 추출
        cmac_data = extract_uid_and_counter(decrypted)
        if cmac_data is None:
            raise ExtractionError(ERR_EXTRACTION_FAILED)
    except NtagError as e:
        logger.info("SDM verification aborted: %s", e)
        return AuthResult(success=False, provided_cmac=provided_cmac, error=str(e))

    # 3단계: 세션 MAC 키 파생 (UID + 카운터 전체 미러링)
    session_mac_key = generate_sdm_session_key(
        sdm_key,
        SESSION_MAC_KEY_PURPOSE,
        cmac_data.uid,
        cmac_data.counter_int,
        FULL_MIRRORING,
    )

    # 4단계: 빈 데이터에 대한 CMAC 계산 후 8바이트로 자름
    calculated_cmac = truncate_cmac(calculate_cmac(session_mac_key, b"")).hex().upper()

    is_valid = calculated_cmac == provided_cmac
    if is_valid:
        logger.debug("SDM CMAC verified: uid=%s counter=%d", cmac_data.uid_hex, cmac_data.counter_int)
    else:
        logger.info(
            "SDM CMAC mismatch: uid=%s counter=%d calculated=%s provided=%s",
            cmac_data.uid_hex, cmac_data.counter_int, calculated_cmac, provided_cmac,
        )

    return AuthResult(
        success=is_valid,
        uid=cmac_data.uid_hex,
        counter=cmac_data.counter_int,
        method=VERIFY_METHOD_FULL_MIRRORING if is_valid else None,
        calculated_cmac=calculated_cmac,
        provided_cmac=provided_cmac,
    )
