import pytest

from geolookup.config import VALIDATION_ERROR_MESSAGE
from geolookup.validation import IpValidation, is_valid_ip, validate_ip_text


class TestIsValidIp:
    @pytest.mark.parametrize("ip", [
        "8.8.8.8",
        "192.168.1.1",
        "255.255.255.255",
        "0.0.0.0",
        "10.0.0.1",
        "172.16.0.1",
        "1.2.3.4",
    ])
    def test_valid_ipv4(self, ip):
        assert is_valid_ip(ip) is True

    @pytest.mark.parametrize("ip", [
        "256.1.1.1",
        "192.168.1",
        "192.168.1.1.1",
        ".192.168.1.1",
        "192.168.1.1.",
        "192.168..1",
        "192.168.1.256",
        "-1.0.0.0",
        "abc.def.ghi.jkl",
        "1.2.3.x",
    ])
    def test_invalid_ipv4(self, ip):
        assert is_valid_ip(ip) is False

    @pytest.mark.parametrize("ip", [
        "::1",
        "2001:db8::1",
        "2001:0db8:0000:0000:0000:0000:0000:0001",
        "fe80::1",
        "2001:db8:85a3::8a2e:370:7334",
        "::ffff:192.0.2.1",
        "::FFFF:192.0.2.1",
        "2001:db8::",
    ])
    def test_valid_ipv6(self, ip):
        assert is_valid_ip(ip) is True

    @pytest.mark.parametrize("ip", [
        "2001:db8:::1",
        "12345::1",
        "gggg::1",
        "1:2:3:4:5:6:7:8:9",
        "::ffff:256.0.2.1",
    ])
    def test_invalid_ipv6(self, ip):
        assert is_valid_ip(ip) is False

    def test_bare_unspecified_address_is_rejected(self):
        # known gap in the IPv6 grammar, kept deliberately
        assert is_valid_ip("::") is False

    def test_every_octet_in_range_is_accepted(self):
        for n in (0, 1, 9, 10, 99, 100, 199, 200, 249, 250, 255):
            assert is_valid_ip(f"{n}.{n}.{n}.{n}")

    def test_out_of_range_octet_in_any_position_is_rejected(self):
        for position in range(4):
            octets = ["1", "2", "3", "4"]
            octets[position] = "256"
            assert not is_valid_ip(".".join(octets))

    def test_empty_string(self):
        assert is_valid_ip("") is False

    def test_whitespace_only(self):
        assert is_valid_ip("   ") is False

    def test_surrounding_whitespace_is_not_trimmed(self):
        assert is_valid_ip(" 8.8.8.8") is False
        assert is_valid_ip("8.8.8.8\n") is False

    def test_domains(self):
        assert is_valid_ip("example.com") is False
        assert is_valid_ip("www.google.com") is False

    def test_cidr_notation(self):
        assert is_valid_ip("192.168.1.0/24") is False
        assert is_valid_ip("10.0.0.0/8") is False
        assert is_valid_ip("2001:db8::/32") is False

    def test_ip_with_port(self):
        assert is_valid_ip("192.168.1.1:8080") is False


class TestValidateIpText:
    def test_empty_is_valid_and_has_no_error(self):
        assert validate_ip_text("") == (True, True, None)

    def test_whitespace_only_counts_as_empty(self):
        state = validate_ip_text("   ")
        assert state.is_empty is True
        assert state.is_valid is True
        assert state.validation_error is None

    def test_valid_ip(self):
        assert validate_ip_text("8.8.8.8") == (False, True, None)

    def test_valid_ip_with_surrounding_spaces(self):
        assert validate_ip_text("  8.8.8.8  ") == (False, True, None)

    def test_invalid_ip(self):
        state = validate_ip_text("invalid")
        assert state.is_empty is False
        assert state.is_valid is False
        assert state.validation_error == VALIDATION_ERROR_MESSAGE


class TestIpValidation:
    def test_reacts_to_source_changes(self):
        value = {"text": ""}
        validation = IpValidation(lambda: value["text"])

        assert validation.is_valid is True
        assert validation.is_empty is True
        assert validation.validation_error is None

        value["text"] = "8.8.8.8"
        assert validation.is_valid is True
        assert validation.is_empty is False
        assert validation.validation_error is None

        value["text"] = "invalid"
        assert validation.is_valid is False
        assert validation.validation_error == "Invalid IP address format"

        value["text"] = "   "
        assert validation.is_empty is True
        assert validation.validation_error is None
