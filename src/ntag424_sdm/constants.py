"""NTAG 424 DNA SDM 상수 (AN12196 / NT4H2421Gx 데이터시트 기준)."""

BLOCK_SIZE = 16
KEY_SIZE = 16
UID_SIZE = 7
COUNTER_SIZE = 3
CMAC_SIZE = 16

# 복호화된 PICCData 최소 길이: UID(7) + SDMReadCtr(3)
MIN_PICC_PLAINTEXT = UID_SIZE + COUNTER_SIZE
# PICCDataTag(1) 포함 시
MIN_TAGGED_PICC_PLAINTEXT = 1 + MIN_PICC_PLAINTEXT

MAX_READ_COUNTER = 0xFFFFFF

# 세션 벡터 목적(Purpose) 바이트
SESSION_ENC_KEY_PURPOSE = bytes([0xC3, 0x3C])
SESSION_MAC_KEY_PURPOSE = bytes([0x3C, 0xC3])

# 목적 바이트 뒤에 붙는 고정 헤더
SESSION_VECTOR_HEADER = bytes([0x00, 0x01, 0x00, 0x80])

# CMAC 서브키 생성용 GF(2^128) 상수 (Rb)
CMAC_RB = bytes(15) + b"\x87"

# 마지막 블록 패딩 시작 바이트 (ISO/IEC 9797-1 method 2)
CMAC_PADDING_BYTE = 0x80

SDM_KEY_ENV_VAR = "NTAG424_SDM_KEY"

VERIFY_METHOD_FULL_MIRRORING = "Full mirroring with empty data"

# 에러 메시지
ERR_KEY_NOT_CONFIGURED = "SDM key not configured"
ERR_DECRYPTION_FAILED = "PICC data decryption failed"
ERR_EXTRACTION_FAILED = "Failed to extract UID and counter"
