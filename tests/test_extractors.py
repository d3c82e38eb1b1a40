"""Tests for resistor, capacitor and IC attribute extraction."""

import re
import time

import pytest

from partsight_mcp.identify import (
    Label,
    ScanPolicy,
    TextLine,
    analyze_capacitor,
    analyze_ic,
    analyze_resistor,
    scan_lines,
)


def _lines(*texts: str) -> list[TextLine]:
    return [TextLine(text, 95.0) for text in texts]


class TestScanLines:
    """Test the shared first/last match line scanner."""

    _DIGITS = re.compile(r'(\d+)')

    def test_first_match_stops_early(self):
        result = scan_lines(_lines("a1", "b2", "c3"), self._DIGITS, ScanPolicy.FIRST_MATCH, lambda m: m.group(1))
        assert result == "1"

    def test_last_match_overwrites(self):
        result = scan_lines(_lines("a1", "b2", "none"), self._DIGITS, ScanPolicy.LAST_MATCH, lambda m: m.group(1))
        assert result == "2"

    @pytest.mark.parametrize("policy", list(ScanPolicy))
    def test_no_match(self, policy):
        assert scan_lines(_lines("abc", "def"), self._DIGITS, policy, lambda m: m.group(1)) is None

    @pytest.mark.parametrize("policy", list(ScanPolicy))
    def test_empty_lines(self, policy):
        assert scan_lines([], self._DIGITS, policy, lambda m: m.group(1)) is None


class TestAnalyzeResistor:
    """Test color band detection and printed value extraction."""

    def test_color_bands(self):
        labels = [Label("red band", 90.0), Label("brown band", 90.0)]
        result = analyze_resistor(labels, [])
        assert result.has_color_bands is True
        assert result.detected_colors == ("red band", "brown band")
        assert result.note == "Resistor identified with visible color bands"

    def test_single_color_is_not_bands(self):
        result = analyze_resistor([Label("Red", 90.0), Label("Resistor", 95.0)], [])
        assert result.has_color_bands is False
        assert result.detected_colors == ()
        assert result.note is None

    def test_color_names_kept_verbatim_in_label_order(self):
        labels = [Label("Violet", 80.0), Label("Resistor", 99.0), Label("GREY Stripe", 75.0), Label("Gold", 70.0)]
        result = analyze_resistor(labels, [])
        assert result.detected_colors == ("Violet", "GREY Stripe")

    @pytest.mark.parametrize("text,expected", [
        ("100Ω", "100Ω"),
        ("4.7kΩ", "4.7kΩ"),
        ("10Kohm", "10KΩ"),
        ("220R", "220Ω"),
        ("1MOHM", "1MΩ"),
        ("Value: 330 ohm 5%", "330Ω"),
    ])
    def test_value_patterns(self, text, expected):
        assert analyze_resistor([], _lines(text)).estimated_value == expected

    def test_milli_and_mega_both_accepted(self):
        """Lower-case m is accepted as a multiplier too; it is not interpreted."""
        assert analyze_resistor([], _lines("2.2mΩ")).estimated_value == "2.2mΩ"
        assert analyze_resistor([], _lines("2.2MΩ")).estimated_value == "2.2MΩ"

    def test_first_match_wins(self):
        """Resistor scan keeps the FIRST matching line (capacitor keeps the last)."""
        result = analyze_resistor([], _lines("100Ω", "1kΩ"))
        assert result.estimated_value == "100Ω"

    def test_no_value(self):
        result = analyze_resistor([], _lines("5%", "carbon film"))
        assert result.estimated_value is None

    def test_value_and_bands_together(self):
        labels = [Label("Orange", 91.0), Label("White", 90.0)]
        result = analyze_resistor(labels, _lines("39kΩ"))
        assert result.has_color_bands is True
        assert result.estimated_value == "39kΩ"


class TestAnalyzeCapacitor:
    """Test capacitance and voltage extraction."""

    def test_last_match_wins(self):
        """Capacitor scan keeps the LAST matching line for each field (resistor keeps the first)."""
        result = analyze_capacitor(_lines("10uF", "16V", "22uF"))
        assert result.estimated_value == "22uF"
        assert result.voltage == "16V"

    def test_voltage_last_match_wins(self):
        result = analyze_capacitor(_lines("25V", "50V"))
        assert result.voltage == "50V"

    def test_value_and_voltage_on_same_line(self):
        result = analyze_capacitor(_lines("470uF 35V"))
        assert result.estimated_value == "470uF"
        assert result.voltage == "35V"

    @pytest.mark.parametrize("text,expected", [
        ("100nF", "100nF"),
        ("4.7µF", "4.7µF"),
        ("4.7μF", "4.7μF"),
        ("22pF", "22pF"),
        ("1 F", "1F"),
        ("10UF", "10UF"),
    ])
    def test_capacitance_units(self, text, expected):
        assert analyze_capacitor(_lines(text)).estimated_value == expected

    def test_lowercase_voltage(self):
        assert analyze_capacitor(_lines("63 v")).voltage == "63V"

    def test_nothing_found(self):
        result = analyze_capacitor(_lines("Panasonic", "105C"))
        assert result.estimated_value is None
        assert result.voltage is None

    def test_empty(self):
        result = analyze_capacitor([])
        assert result.estimated_value is None
        assert result.voltage is None


class TestLongDigitRuns:
    """A long digit run with no unit must fail fast, not backtrack for minutes."""

    LONG_RUN = "1" * 5000

    def test_resistor_scan_is_fast(self):
        start = time.perf_counter()
        result = analyze_resistor([], _lines(self.LONG_RUN))
        assert result.estimated_value is None
        assert time.perf_counter() - start < 1.0

    def test_capacitor_scan_is_fast(self):
        start = time.perf_counter()
        result = analyze_capacitor(_lines(self.LONG_RUN, self.LONG_RUN + "."))
        assert result.estimated_value is None
        assert result.voltage is None
        assert time.perf_counter() - start < 1.0

    def test_value_after_long_run_still_found(self):
        assert analyze_resistor([], _lines(self.LONG_RUN + " x 47R")).estimated_value == "47Ω"

    @pytest.mark.parametrize("text,expected", [
        ("10.kΩ", "10.kΩ"),
        ("1.2.3kΩ", "2.3kΩ"),
        ("0.5 ohm", "0.5Ω"),
    ])
    def test_decimal_edges(self, text, expected):
        assert analyze_resistor([], _lines(text)).estimated_value == expected

    def test_voltage_takes_whole_digit_run(self):
        assert analyze_capacitor(_lines("1000uF 450V")).voltage == "450V"


class TestAnalyzeIC:
    """Test part number and family prefix detection."""

    def test_lm358(self):
        result = analyze_ic(_lines("LM358"))
        assert "LM358" in result.part_numbers
        assert "Likely LM series" in result.manufacturers

    def test_part_number_is_trimmed(self):
        result = analyze_ic(_lines("  NE555P  "))
        assert result.part_numbers == ("NE555P",)

    def test_prefix_uses_untrimmed_line(self):
        """Leading whitespace shifts the prefix window, so no family hint."""
        result = analyze_ic(_lines(" LM358"))
        assert result.part_numbers == ("LM358",)
        assert result.manufacturers == ()

    def test_prefix_is_case_insensitive(self):
        result = analyze_ic(_lines("sn74hc00n"))
        assert result.part_numbers == ("sn74hc00n",)
        assert result.manufacturers == ("Likely SN series",)

    @pytest.mark.parametrize("text", ["ABC", "LM358-N", "TOOLONGPARTNUMBER1", "LM 358"])
    def test_not_part_numbers(self, text):
        assert analyze_ic(_lines(text)).part_numbers == ()

    def test_prefix_checked_independently_of_part_number(self):
        """A line that is not a part number can still carry a family hint."""
        result = analyze_ic(_lines("LM 358 DUAL OPAMP"))
        assert result.part_numbers == ()
        assert result.manufacturers == ("Likely LM series",)

    def test_max_prefix_never_matches(self):
        """Only two characters are compared, so the three-letter MAX entry cannot hit."""
        result = analyze_ic(_lines("MAX232"))
        assert result.part_numbers == ("MAX232",)
        assert result.manufacturers == ()

    def test_duplicates_retained(self):
        result = analyze_ic(_lines("74HC595", "74HC595"))
        assert result.part_numbers == ("74HC595", "74HC595")
        assert result.manufacturers == ("Likely 74 series", "Likely 74 series")

    def test_unknown_prefix(self):
        result = analyze_ic(_lines("ATMEGA328P"))
        assert result.part_numbers == ("ATMEGA328P",)
        assert result.manufacturers == ()
