import os
import unittest
from unittest import mock

from Crypto.Cipher import AES
from Crypto.Hash import CMAC

from ntag424_sdm.constants import SDM_KEY_ENV_VAR, VERIFY_METHOD_FULL_MIRRORING
from ntag424_sdm.verify import AuthResult, verify_sdm_auth

ZERO_KEY_HEX = "00000000000000000000000000000000"

# AN12196 SUN 예제: UID 04DE5F1EACC040, SDMReadCtr 61
AN12196_PICC_DATA = "EF963FF7828658A599F3041510671E88"
AN12196_CMAC = "94EED9EE65337086"


def _aes_cmac(key, msg=b""):
    cobj = CMAC.new(key, ciphermod=AES)
    if msg:
        cobj.update(msg)
    return cobj.digest()


def _make_sun(key, uid, counter):
    """pycryptodome CMAC으로 PICCData와 SDMMAC을 독립적으로 생성합니다."""
    plain = b"\xC7" + uid + counter.to_bytes(3, "little") + bytes(5)
    picc_data = AES.new(key, AES.MODE_ECB).encrypt(plain)
    sv2 = bytes.fromhex("3CC300010080") + uid + counter.to_bytes(3, "little")
    mac = _aes_cmac(_aes_cmac(key, sv2))[1::2]
    return picc_data.hex().upper(), mac.hex().upper()


@mock.patch.dict(os.environ, {}, clear=True)
class VerifySdmAuthTest(unittest.TestCase):
    def test_an12196_vector(self):
        result = verify_sdm_auth(AN12196_PICC_DATA, AN12196_CMAC, ZERO_KEY_HEX)
        self.assertTrue(result.success)
        self.assertEqual(result.uid, "04DE5F1EACC040")
        self.assertEqual(result.counter, 61)
        self.assertEqual(result.method, VERIFY_METHOD_FULL_MIRRORING)
        self.assertEqual(result.calculated_cmac, AN12196_CMAC)
        self.assertEqual(result.provided_cmac, AN12196_CMAC)
        self.assertIsNone(result.error)

    def test_lowercase_input(self):
        result = verify_sdm_auth(AN12196_PICC_DATA.lower(), AN12196_CMAC.lower(), ZERO_KEY_HEX)
        self.assertTrue(result.success)
        self.assertEqual(result.provided_cmac, AN12196_CMAC)

    def test_independently_generated_message(self):
        key = bytes.fromhex("00112233445566778899AABBCCDDEEFF")
        uid = bytes.fromhex("04A1B2C3D4E5F6")
        picc_data, cmac = _make_sun(key, uid, 0x0102AB)
        result = verify_sdm_auth(picc_data, cmac, key.hex())
        self.assertTrue(result.success)
        self.assertEqual(result.uid, "04A1B2C3D4E5F6")
        self.assertEqual(result.counter, 0x0102AB)

    def test_cmac_mismatch_is_not_an_error(self):
        result = verify_sdm_auth(AN12196_PICC_DATA, "1234567890abcdef", ZERO_KEY_HEX)
        self.assertFalse(result.success)
        self.assertIsNone(result.error)
        self.assertIsNone(result.method)
        self.assertEqual(result.uid, "04DE5F1EACC040")
        self.assertEqual(result.counter, 61)
        self.assertEqual(result.calculated_cmac, AN12196_CMAC)
        self.assertEqual(result.provided_cmac, "1234567890ABCDEF")

    def test_wrong_key_does_not_verify(self):
        result = verify_sdm_auth(AN12196_PICC_DATA, AN12196_CMAC, "FF" * 16)
        self.assertFalse(result.success)
        self.assertIsNone(result.error)
        self.assertNotEqual(result.calculated_cmac, AN12196_CMAC)

    def test_key_not_configured(self):
        result = verify_sdm_auth("1234567890ABCDEF1234567890ABCDEF", "1234567890ABCDEF")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "SDM key not configured")
        self.assertEqual(result.provided_cmac, "1234567890ABCDEF")
        self.assertIsNone(result.calculated_cmac)

    def test_empty_key_counts_as_absent(self):
        result = verify_sdm_auth(AN12196_PICC_DATA, AN12196_CMAC, "")
        self.assertEqual(result.error, "SDM key not configured")

    def test_key_from_environment(self):
        with mock.patch.dict(os.environ, {SDM_KEY_ENV_VAR: ZERO_KEY_HEX}):
            result = verify_sdm_auth(AN12196_PICC_DATA, AN12196_CMAC)
        self.assertTrue(result.success)

    def test_explicit_key_overrides_environment(self):
        with mock.patch.dict(os.environ, {SDM_KEY_ENV_VAR: "FF" * 16}):
            result = verify_sdm_auth(AN12196_PICC_DATA, AN12196_CMAC, ZERO_KEY_HEX)
        self.assertTrue(result.success)

    def test_invalid_picc_hex(self):
        result = verify_sdm_auth("invalid", "invalid", ZERO_KEY_HEX)
        self.assertFalse(result.success)
        self.assertTrue(result.error.startswith("Invalid hex in PICC data"))
        self.assertEqual(result.provided_cmac, "INVALID")

    def test_invalid_key_hex(self):
        result = verify_sdm_auth(AN12196_PICC_DATA, AN12196_CMAC, "XYZ")
        self.assertFalse(result.success)
        self.assertTrue(result.error.startswith("Invalid hex in SDM key"))

    def test_decryption_failure(self):
        result = verify_sdm_auth("1234567890ABCDEF", AN12196_CMAC, ZERO_KEY_HEX)
        self.assertFalse(result.success)
        self.assertEqual(result.error, "PICC data decryption failed")
        self.assertIsNone(result.uid)

    def test_short_key_fails_decryption(self):
        result = verify_sdm_auth(AN12196_PICC_DATA, AN12196_CMAC, "0011223344556677")
        self.assertEqual(result.error, "PICC data decryption failed")

    def test_extraction_failure(self):
        with mock.patch("ntag424_sdm.verify.extract_uid_and_counter", return_value=None):
            result = verify_sdm_auth(AN12196_PICC_DATA, AN12196_CMAC, ZERO_KEY_HEX)
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Failed to extract UID and counter")

    def test_arbitrary_picc_data_returns_both_cmacs(self):
        result = verify_sdm_auth("00000000000000000000000000000000", "1234567890ABCDEF", ZERO_KEY_HEX)
        self.assertFalse(result.success)
        self.assertEqual(len(result.calculated_cmac), 16)
        self.assertEqual(result.calculated_cmac, result.calculated_cmac.upper())
        self.assertEqual(result.provided_cmac, "1234567890ABCDEF")


class AuthResultTest(unittest.TestCase):
    def test_to_dict(self):
        result = AuthResult(success=False, provided_cmac="00", error="SDM key not configured")
        self.assertEqual(result.to_dict(), {
            "success": False,
            "uid": None,
            "counter": None,
            "method": None,
            "calculatedCmac": None,
            "providedCmac": "00",
            "error": "SDM key not configured",
        })

    def test_immutable(self):
        result = AuthResult(success=True)
        with self.assertRaises(AttributeError):
            result.success = False


if __name__ == "__main__":
    unittest.main()
